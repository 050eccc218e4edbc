# engine.py
# Euler-Maruyama discretisation engine.
#
# Paths are produced in fixed-size blocks of consecutive simulation indices.
# Block b owns its own random stream, SeedSequence(entropy, spawn_key=(b,)),
# so the normals feeding simulation i depend only on (seed, i) and never on
# whether blocks run sequentially or on a thread pool, nor on completion
# order. Workers write into disjoint, pre-indexed slices of one output array.

from __future__ import annotations
import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from .core import SimulationConfig
from .fractional import fgn_covariance_factor
from .processes import StochasticProcess
from .trajectories import Trajectories

__all__ = ["BLOCK_SIZE", "simulate", "block_seed"]

logger = logging.getLogger(__name__)

# Fixed: changing it changes which stream feeds which path.
BLOCK_SIZE = 4096


def block_seed(entropy: int, block: int) -> np.random.SeedSequence:
    """Seed of block ``block`` derived from the run's root entropy."""
    return np.random.SeedSequence(entropy, spawn_key=(block,))


def _plan_blocks(n_paths: int) -> list[tuple[int, int, int]]:
    """Split ``n_paths`` into ``(block, start, stop)`` triples."""
    blocks = []
    start = 0
    b = 0
    while start < n_paths:
        stop = min(start + BLOCK_SIZE, n_paths)
        blocks.append((b, start, stop))
        start = stop
        b += 1
    return blocks


def _simulate_block(
    out: np.ndarray,
    start: int,
    stop: int,
    seed: np.random.SeedSequence,
    *,
    process: StochasticProcess,
    times: np.ndarray,
    dt: float,
    x0: float,
    factor: Optional[np.ndarray],
) -> None:
    """Fill ``out[start:stop]`` with paths driven by one block's stream."""
    rng = np.random.default_rng(seed)
    n = stop - start
    n_steps = times.size - 1

    Z = rng.standard_normal((n, n_steps))
    if factor is None:
        dW = Z * math.sqrt(dt)
    else:
        dW = Z @ factor.T  # row-wise L z

    x = np.full(n, x0, dtype=float)
    out[start:stop, 0] = x0
    for i in range(n_steps):
        x = process.step(x, float(times[i]), dt, dW[:, i])
        out[start:stop, i + 1] = process.observe(x)


def simulate(
    process: StochasticProcess,
    config: SimulationConfig,
    *,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> Trajectories:
    """Generate ``config.num_simulations`` paths of ``process``.

    Parameters
    ----------
    process : StochasticProcess
        Model supplying drift, diffusion and the step rule.
    config : SimulationConfig
        Initial value, time window, grid size and path count.
    seed : int, optional
        Root seed. Identical seeds give identical trajectories whatever
        ``config.parallel`` and ``max_workers`` are. Without a seed fresh
        OS entropy is drawn and logged.
    max_workers : int, optional
        Thread count when ``config.parallel`` is true (default: CPU count).

    Returns
    -------
    Trajectories
        ``paths[i]`` is simulation index ``i``.
    """
    if not isinstance(config, SimulationConfig):
        raise TypeError(f"config must be a SimulationConfig, got {type(config).__name__}")

    root = np.random.SeedSequence(seed)
    if seed is None:
        logger.warning("no seed given; drew entropy %d", root.entropy)

    times = config.time_grid()
    dt = config.dt
    n_paths = config.num_simulations

    factor = None
    if process.hurst is not None:
        # Built once before fan-out; shared read-only by all blocks.
        factor = fgn_covariance_factor(float(process.hurst), config.num_steps, dt)

    out = np.empty((n_paths, config.num_steps + 1), dtype=float)
    blocks = _plan_blocks(n_paths)
    kwargs = dict(process=process, times=times, dt=dt, x0=float(config.initial_value), factor=factor)

    if config.parallel and len(blocks) > 1:
        workers = max_workers or os.cpu_count() or 1
        logger.debug(
            "simulating %s: %d paths x %d steps in %d blocks on %d threads",
            type(process).__name__, n_paths, config.num_steps, len(blocks), workers,
        )
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futs = [
                ex.submit(_simulate_block, out, start, stop, block_seed(root.entropy, b), **kwargs)
                for b, start, stop in blocks
            ]
            for f in futs:
                f.result()  # re-raises worker errors
    else:
        logger.debug(
            "simulating %s: %d paths x %d steps in %d blocks sequentially",
            type(process).__name__, n_paths, config.num_steps, len(blocks),
        )
        for b, start, stop in blocks:
            _simulate_block(out, start, stop, block_seed(root.entropy, b), **kwargs)

    return Trajectories(times, out)
