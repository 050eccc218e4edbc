from __future__ import annotations
import math
import numbers
from dataclasses import dataclass
from datetime import date

import numpy as np

from .dates import year_fraction


CALL = "call"
PUT  = "put"


# ---------------------------------------------------------------------------
# Simulation configuration
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SimulationConfig:
    """Everything the discretisation engine needs besides the process.

    Parameters
    ----------
    initial_value : float
        State of every path at ``start_time``.
    start_time, end_time : float
        Bounds of the simulation window (dimensionless, usually years).
    num_steps : int
        Number of Euler steps; each path has ``num_steps + 1`` points.
    num_simulations : int
        Number of independent paths.
    parallel : bool
        Fan path generation out over worker threads (default ``False``).
        Output is identical either way.
    """
    initial_value: float
    start_time: float
    end_time: float
    num_steps: int
    num_simulations: int
    parallel: bool = False

    def __post_init__(self):
        for name in ("initial_value", "start_time", "end_time"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        for name in ("num_steps", "num_simulations"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            value = int(value)  # numpy integers become plain int
            object.__setattr__(self, name, value)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")
        if self.start_time >= self.end_time:
            raise ValueError(
                f"start_time must be < end_time, got {self.start_time} >= {self.end_time}"
            )

    @classmethod
    def for_expiry(
        cls,
        initial_value: float,
        valuation_date: date,
        expiry: date,
        num_steps: int,
        num_simulations: int,
        parallel: bool = False,
        *,
        convention: str = "act/365f",
    ) -> SimulationConfig:
        """Build a config spanning ``valuation_date`` to ``expiry``.

        Time runs from 0 to the year fraction between the two dates.
        """
        if expiry <= valuation_date:
            raise ValueError(f"expiry {expiry} must be after valuation date {valuation_date}")
        T = year_fraction(valuation_date, expiry, convention)
        return cls(initial_value, 0.0, T, num_steps, num_simulations, parallel)

    @property
    def horizon(self) -> float:
        """Length of the simulation window, ``end_time - start_time``."""
        return self.end_time - self.start_time

    @property
    def dt(self) -> float:
        return (self.end_time - self.start_time) / self.num_steps

    def time_grid(self) -> np.ndarray:
        """Uniform grid ``start_time + i*dt`` for ``i = 0..num_steps``.

        The last point is pinned to ``end_time`` so the grid ends exactly
        on the requested horizon.
        """
        times = self.start_time + np.arange(self.num_steps + 1) * self.dt
        times[-1] = self.end_time
        return times
