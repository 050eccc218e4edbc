# payoffs.py
# Payoff capabilities consumed by the Monte Carlo pricer.
#
# A payoff maps a path (1-D array, t=0 point included) or a stack of paths
# (shape ``(n_paths, n_steps+1)``) to the undiscounted amount paid at
# expiry. Vanilla payoffs only look at the last column; Asian payoffs
# aggregate the whole row.

from __future__ import annotations
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from .core import CALL, PUT

__all__ = [
    "Payoff",
    "VanillaPayoff",
    "AsianPayoff",
    "path_average",
    "ARITHMETIC_DISCRETE",
    "ARITHMETIC_CONTINUOUS",
    "GEOMETRIC_DISCRETE",
    "GEOMETRIC_CONTINUOUS",
    "FIXED",
    "FLOATING",
]

ARITHMETIC_DISCRETE   = "arithmetic_discrete"
ARITHMETIC_CONTINUOUS = "arithmetic_continuous"
GEOMETRIC_DISCRETE    = "geometric_discrete"
GEOMETRIC_CONTINUOUS  = "geometric_continuous"
AVERAGING_METHODS = (
    ARITHMETIC_DISCRETE, ARITHMETIC_CONTINUOUS, GEOMETRIC_DISCRETE, GEOMETRIC_CONTINUOUS,
)

FIXED    = "fixed"
FLOATING = "floating"


def _check_kind(kind: str) -> None:
    if kind not in (CALL, PUT):
        raise ValueError(f"kind must be 'call' or 'put', got {kind!r}")


def _intrinsic(underlying, strike, kind: str):
    if kind == CALL:
        return np.maximum(underlying - strike, 0.0)
    return np.maximum(strike - underlying, 0.0)


def _as_output(values: np.ndarray, single: bool):
    return float(values[0]) if single else values


class Payoff(ABC):
    """Undiscounted payoff of a European-exercise contract."""

    @abstractmethod
    def evaluate(self, paths):
        """Payoff of one path (returns float) or of each row of a 2-D array."""


# ---------------------------------------------------------------------------
# Vanilla
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class VanillaPayoff(Payoff):
    """``max(S_T - K, 0)`` for calls, ``max(K - S_T, 0)`` for puts."""
    strike: float
    kind: str = CALL

    def __post_init__(self):
        if self.strike <= 0:
            raise ValueError(f"strike must be positive, got {self.strike}")
        _check_kind(self.kind)

    def payoff(self, underlying):
        """Payoff on a terminal value (scalar or array)."""
        out = _intrinsic(np.asarray(underlying, dtype=float), self.strike, self.kind)
        return float(out) if out.ndim == 0 else out

    def evaluate(self, paths):
        paths = np.asarray(paths, dtype=float)
        return self.payoff(paths[..., -1])


# ---------------------------------------------------------------------------
# Asian
# ---------------------------------------------------------------------------
def path_average(paths: np.ndarray, method: str) -> np.ndarray:
    """Average of each row of ``paths`` (shape (n_paths, n_steps+1)).

    Discrete sampling averages the monitoring points ``t_1..t_n`` (the
    t=0 point is excluded, standard Asian convention). Continuous sampling
    approximates ``(1/T) * integral_0^T S_t dt`` with the trapezoidal rule
    on the uniform grid, t=0 included.
    """
    if method not in AVERAGING_METHODS:
        raise ValueError(f"averaging must be one of {AVERAGING_METHODS}, got {method!r}")

    if method.startswith("geometric"):
        if np.any(paths <= 0):
            raise ValueError("geometric averaging requires strictly positive paths")
        values = np.log(paths)
    else:
        values = paths

    if method.endswith("discrete"):
        avg = values[:, 1:].mean(axis=1)
    else:
        n_steps = values.shape[1] - 1
        avg = (values.sum(axis=1) - 0.5 * (values[:, 0] + values[:, -1])) / n_steps

    return np.exp(avg) if method.startswith("geometric") else avg


@dataclass(frozen=True)
class AsianPayoff(Payoff):
    """Average-rate (fixed strike) or average-strike (floating) payoff.

    Fixed:    call ``max(A - K, 0)``,   put ``max(K - A, 0)``
    Floating: call ``max(S_T - A, 0)``, put ``max(A - S_T, 0)``
    """
    kind: str = CALL
    averaging: str = ARITHMETIC_DISCRETE
    strike_type: str = FIXED
    strike: Optional[float] = None

    def __post_init__(self):
        _check_kind(self.kind)
        if self.averaging not in AVERAGING_METHODS:
            raise ValueError(f"averaging must be one of {AVERAGING_METHODS}, got {self.averaging!r}")
        if self.strike_type not in (FIXED, FLOATING):
            raise ValueError(f"strike_type must be 'fixed' or 'floating', got {self.strike_type!r}")
        if self.strike_type == FIXED:
            if self.strike is None:
                raise ValueError("fixed-strike Asian payoff requires a strike")
            if self.strike <= 0:
                raise ValueError(f"strike must be positive, got {self.strike}")

    def evaluate(self, paths):
        paths = np.asarray(paths, dtype=float)
        single = paths.ndim == 1
        paths = np.atleast_2d(paths)
        if paths.shape[1] < 2:
            raise ValueError("Asian payoff needs at least one step after t=0")

        avg = path_average(paths, self.averaging)
        if self.strike_type == FIXED:
            values = _intrinsic(avg, self.strike, self.kind)
        else:
            values = _intrinsic(paths[:, -1], avg, self.kind)
        return _as_output(values, single)
