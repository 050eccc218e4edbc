from __future__ import annotations
from dataclasses import dataclass

import numpy as np


def _frozen(a) -> np.ndarray:
    a = np.array(a, dtype=float)
    a.setflags(write=False)
    return a


@dataclass(frozen=True, eq=False)
class Trajectories:
    """
    Simulated ensemble produced by the discretisation engine.

    Attributes
    ----------
    times : np.ndarray
        Time grid, shape (n_steps + 1,), uniform spacing ``dt``.
    paths : np.ndarray
        One row per simulation, shape (n_paths, n_steps + 1). Row ``i``
        is simulation index ``i``.

    Both arrays are copied on construction and flagged read-only.
    """

    times: np.ndarray
    paths: np.ndarray

    def __post_init__(self) -> None:
        times = _frozen(self.times)
        paths = _frozen(self.paths)
        if times.ndim != 1 or times.size < 2:
            raise ValueError(f"times must be 1-D with at least 2 points, got shape {times.shape}")
        if paths.ndim != 2 or paths.shape[1] != times.size:
            raise ValueError(
                f"paths must have shape (n_paths, {times.size}), got {paths.shape}"
            )
        if np.any(np.diff(times) <= 0):
            raise ValueError("times must be strictly increasing")
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "paths", paths)

    def __len__(self) -> int:
        return self.n_paths

    @property
    def n_paths(self) -> int:
        """Number of simulated paths."""
        return self.paths.shape[0]

    @property
    def n_steps(self) -> int:
        """Number of time steps."""
        return self.times.size - 1

    @property
    def dt(self) -> float:
        return float((self.times[-1] - self.times[0]) / self.n_steps)

    @property
    def initial_value(self) -> float:
        if self.n_paths == 0:
            raise ValueError("ensemble holds no paths")
        return float(self.paths[0, 0])

    @property
    def terminal_values(self) -> np.ndarray:
        """Last column: the value of every path at ``times[-1]``."""
        return self.paths[:, -1]

    @property
    def mean_path(self) -> np.ndarray:
        """Elementwise average across paths, shape (n_steps + 1,)."""
        return self.paths.mean(axis=0)

    def path(self, i: int) -> np.ndarray:
        """Path of simulation index ``i``."""
        return self.paths[i]

    def filter(self, mask) -> Trajectories:
        """New ensemble holding only the rows where ``mask`` is true.

        ``mask`` is a boolean array of length ``n_paths`` or a callable
        mapping the paths array to one.
        """
        if callable(mask):
            mask = mask(self.paths)
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (self.n_paths,):
            raise ValueError(f"mask must have shape ({self.n_paths},), got {mask.shape}")
        return Trajectories(self.times, self.paths[mask])
