# monte_carlo.py
# Monte Carlo pricer: trajectories + payoff + discount rate -> (price, stderr).

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from scipy.stats import norm

from .core import SimulationConfig
from .engine import simulate
from .payoffs import Payoff
from .processes import StochasticProcess
from .trajectories import Trajectories

__all__ = ["MonteCarloResult", "price_trajectories", "price_monte_carlo"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonteCarloResult:
    """Outcome of one Monte Carlo pricing run.

    Attributes
    ----------
    value : float
        Mean discounted payoff.
    standard_error : float or None
        Sample standard deviation (ddof=1) of the discounted payoffs over
        ``sqrt(n_paths)``; ``None`` for a single path.
    n_paths : int
        Number of paths averaged.
    discount_factor : float
        ``exp(-r * T)`` applied to every payoff.
    discounted_payoffs : np.ndarray
        Per-path discounted payoffs (read-only).
    """
    value: float
    standard_error: Optional[float]
    n_paths: int
    discount_factor: float
    discounted_payoffs: np.ndarray = field(repr=False, compare=False)

    def price(self) -> float:
        return self.value

    def error(self) -> Optional[float]:
        return self.standard_error

    def confidence_interval(self, level: float = 0.95) -> tuple[float, float]:
        """Normal-approximation interval ``price +/- z * stderr``."""
        if not (0.0 < level < 1.0):
            raise ValueError(f"level must be in (0, 1), got {level}")
        if self.standard_error is None:
            raise ValueError("a single path has no confidence interval")
        z = float(norm.ppf(0.5 + 0.5 * level))
        return (self.value - z * self.standard_error, self.value + z * self.standard_error)


def _summarise(discounted: np.ndarray, df: float) -> MonteCarloResult:
    n = discounted.size
    mean = float(discounted.mean())
    se = float(discounted.std(ddof=1) / math.sqrt(n)) if n > 1 else None
    discounted.setflags(write=False)
    return MonteCarloResult(mean, se, n, df, discounted)


def price_trajectories(
    payoff: Payoff,
    trajectories: Trajectories,
    rate: float,
) -> MonteCarloResult:
    """Discount and average a payoff over an existing ensemble.

    The discount horizon is the trajectories' time span,
    ``times[-1] - times[0]``.
    """
    if trajectories.n_paths < 1:
        raise ValueError("trajectories hold no paths")
    T = float(trajectories.times[-1] - trajectories.times[0])
    df = math.exp(-rate * T)

    payoffs = np.asarray(payoff.evaluate(trajectories.paths), dtype=float)
    if payoffs.shape != (trajectories.n_paths,):
        raise ValueError(
            f"payoff returned shape {payoffs.shape}, expected ({trajectories.n_paths},)"
        )
    return _summarise(df * payoffs, df)


def price_monte_carlo(
    payoff: Payoff,
    process: StochasticProcess,
    config: SimulationConfig,
    rate: float,
    *,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> MonteCarloResult:
    """Simulate ``process`` under ``config`` and price ``payoff``.

    Parameters
    ----------
    payoff : Payoff
        Terminal or path-dependent payoff.
    process : StochasticProcess
        Underlying dynamics (use drift = ``rate`` for risk-neutral GBM).
    config : SimulationConfig
        ``end_time - start_time`` is the time to expiry.
    rate : float
        Continuously-compounded discount rate.
    seed : int, optional
        Root seed for reproducible runs.

    Returns
    -------
    MonteCarloResult
        ``price()`` and ``error()`` of the estimate.
    """
    traj = simulate(process, config, seed=seed, max_workers=max_workers)
    result = price_trajectories(payoff, traj, rate)
    logger.info(
        "MC price %s/%s: %.6f (stderr %s, n=%d)",
        type(payoff).__name__, type(process).__name__, result.value,
        "n/a" if result.standard_error is None else f"{result.standard_error:.6f}",
        result.n_paths,
    )
    return result
