"""Monte Carlo convergence diagnostics.

Runs the pricer at increasing path counts over several seeds and
measures how the standard error decays; for an unbiased estimator it
falls like ``n^{-1/2}``.
"""

from __future__ import annotations

import numpy as np
from dataclasses import replace
from typing import Optional

from .core import SimulationConfig
from .monte_carlo import price_monte_carlo
from .payoffs import Payoff
from .processes import StochasticProcess

__all__ = ["convergence_analysis"]


def convergence_analysis(
    payoff: Payoff,
    process: StochasticProcess,
    config: SimulationConfig,
    rate: float,
    sim_counts: list[int] | np.ndarray,
    *,
    seeds: list[int] | range = range(5),
    reference: Optional[float] = None,
) -> dict:
    """Analyse Monte Carlo convergence as ``num_simulations`` grows.

    Parameters
    ----------
    sim_counts : array-like
        Path counts to test; each replaces ``config.num_simulations``.
    seeds : iterable of int
        Seeds averaged over at every path count.
    reference : float, optional
        True price; when given, absolute pricing errors are reported too.

    Returns
    -------
    dict
        ``"sim_counts"``, ``"prices"`` (seed-averaged), ``"stderrs"``
        (seed-averaged), ``"order"`` (fitted decay exponent of the
        standard error, about 0.5) and, with a reference, ``"errors"``.
    """
    sim_counts = [int(n) for n in sim_counts]
    seeds = list(seeds)
    if len(sim_counts) < 2:
        raise ValueError("need at least two simulation counts")
    if min(sim_counts) < 2:
        raise ValueError("simulation counts must be >= 2 to estimate a standard error")
    if not seeds:
        raise ValueError("need at least one seed")

    prices, stderrs = [], []
    for n in sim_counts:
        cfg = replace(config, num_simulations=n)
        runs = [price_monte_carlo(payoff, process, cfg, rate, seed=s) for s in seeds]
        prices.append(float(np.mean([r.price() for r in runs])))
        stderrs.append(float(np.mean([r.error() for r in runs])))

    # stderr ~ C / n^order  => log(se) = -order * log(n) + const
    coeffs = np.polyfit(np.log(sim_counts), np.log(stderrs), 1)
    out = {
        "sim_counts": sim_counts,
        "prices": prices,
        "stderrs": stderrs,
        "order": -float(coeffs[0]),
    }
    if reference is not None:
        out["errors"] = [abs(p - reference) for p in prices]
    return out
