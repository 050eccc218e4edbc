# fractional.py
# Correlated Gaussian noise for fractional processes.
#
# Increments of a fractional Brownian motion W^H on a uniform grid form a
# stationary Gaussian sequence (fractional Gaussian noise) with
#
#     Cov(dW_i, dW_j) = dt^(2H) * gamma(|i - j|),
#     gamma(k) = 0.5 * (|k+1|^(2H) - 2|k|^(2H) + |k-1|^(2H)).
#
# The lower Cholesky factor L of that matrix maps i.i.d. N(0,1) draws to
# correlated increments (dW = L z). Building L is O(n^3), so it is done once
# per (H, n_steps, dt) and the frozen result is shared by every path.

from __future__ import annotations
import logging
from functools import lru_cache

import numpy as np
from scipy.linalg import cholesky, toeplitz

__all__ = ["fgn_autocovariance", "fgn_covariance_factor", "validate_hurst"]

logger = logging.getLogger(__name__)


def validate_hurst(hurst: float) -> float:
    hurst = float(hurst)
    if not (0.0 < hurst < 1.0):
        raise ValueError(f"hurst must be in (0, 1), got {hurst}")
    return hurst


def fgn_autocovariance(hurst: float, n_steps: int) -> np.ndarray:
    """Autocovariance ``gamma(k)``, ``k = 0..n_steps-1``, of unit-spaced fGn."""
    hurst = validate_hurst(hurst)
    k = np.arange(n_steps, dtype=float)
    two_h = 2.0 * hurst
    return 0.5 * (np.abs(k + 1.0) ** two_h - 2.0 * k ** two_h + np.abs(k - 1.0) ** two_h)


# Each entry is a dense n_steps x n_steps array (8 * n_steps**2 bytes).
@lru_cache(maxsize=4)
def fgn_covariance_factor(hurst: float, n_steps: int, dt: float) -> np.ndarray:
    """Lower Cholesky factor of the fGn increment covariance on a grid.

    Parameters
    ----------
    hurst : float
        Hurst exponent, ``0 < H < 1``.
    n_steps : int
        Number of increments per path.
    dt : float
        Grid spacing.

    Returns
    -------
    ndarray, shape (n_steps, n_steps)
        Read-only lower-triangular ``L`` with ``L @ L.T`` equal to the
        increment covariance. Memoised; callers must not copy-and-mutate
        expecting the cache to change.
    """
    hurst = validate_hurst(hurst)
    if n_steps < 1:
        raise ValueError(f"n_steps must be >= 1, got {n_steps}")
    if dt <= 0.0:
        raise ValueError(f"dt must be positive, got {dt}")

    logger.debug("factoring fGn covariance: H=%.4f n_steps=%d dt=%.6g", hurst, n_steps, dt)
    cov = toeplitz(fgn_autocovariance(hurst, n_steps))
    L = cholesky(cov, lower=True) * dt ** hurst
    L.setflags(write=False)
    return L
