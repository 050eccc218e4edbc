# processes.py
# Stochastic process models for the discretisation engine.
#
# Every model is an immutable parameter record exposing drift(x, t) and
# diffusion(x, t). Both accept a float or an array of states (one per path)
# at a scalar time and broadcast. The engine never inspects the concrete
# type: it calls step() and observe(), and reads ``hurst`` to decide between
# independent and fractional noise.

from __future__ import annotations
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .fractional import validate_hurst


__all__ = [
    "StochasticProcess",
    "BrownianMotion",
    "ArithmeticBrownianMotion",
    "GeometricBrownianMotion",
    "CoxIngersollRoss",
    "OrnsteinUhlenbeck",
    "HoLee",
    "HullWhite",
    "ExtendedVasicek",
    "BlackDermanToy",
    "FractionalBrownianMotion",
    "FractionalOrnsteinUhlenbeck",
    "FractionalCoxIngersollRoss",
]

TimeFunction = Callable[[float], float]


def _as_time_function(value: Union[float, TimeFunction]) -> TimeFunction:
    """Accept a constant or a callable of time; always return a callable."""
    if callable(value):
        return value
    const = float(value)
    return lambda t: const


def _require_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


class StochasticProcess(ABC):
    """SDE ``dX = drift(X, t) dt + diffusion(X, t) dW``."""

    #: Hurst exponent of the driving noise; ``None`` means independent increments.
    hurst: Optional[float] = None

    @abstractmethod
    def drift(self, x, t: float):
        ...

    @abstractmethod
    def diffusion(self, x, t: float):
        ...

    def step(self, x, t: float, dt: float, dw):
        """One Euler-Maruyama update from state ``x`` at time ``t``."""
        return x + self.drift(x, t) * dt + self.diffusion(x, t) * dw

    def observe(self, x):
        """Value recorded in the trajectory for internal state ``x``."""
        return x

    def simulate(self, config, *, seed: Optional[int] = None, max_workers: Optional[int] = None):
        """Shortcut for :func:`stochpricer.engine.simulate`."""
        from .engine import simulate
        return simulate(self, config, seed=seed, max_workers=max_workers)


# -----------------------------
# 1) Brownian motions
# -----------------------------
@dataclass(frozen=True)
class BrownianMotion(StochasticProcess):
    """Standard Brownian motion, ``dX = dW``."""

    def drift(self, x, t: float):
        return np.zeros_like(x, dtype=float)

    def diffusion(self, x, t: float):
        return np.ones_like(x, dtype=float)


@dataclass(frozen=True)
class ArithmeticBrownianMotion(StochasticProcess):
    """``dX = mu dt + sigma dW``."""
    mu: float
    sigma: float

    def __post_init__(self):
        _require_non_negative("sigma", self.sigma)

    def drift(self, x, t: float):
        return self.mu + np.zeros_like(x, dtype=float)

    def diffusion(self, x, t: float):
        return self.sigma + np.zeros_like(x, dtype=float)


@dataclass(frozen=True)
class GeometricBrownianMotion(StochasticProcess):
    """``dX = mu X dt + sigma X dW``.

    With ``log_euler=True`` (default) a step applies Euler-Maruyama to
    ``ln X`` and maps back::

        X_{n+1} = X_n * exp((mu - 0.5*sigma^2) dt + sigma dW)

    which is exact for constant coefficients and keeps paths positive.
    ``log_euler=False`` uses the plain Euler-Maruyama update.
    """
    mu: float
    sigma: float
    log_euler: bool = True

    def __post_init__(self):
        _require_non_negative("sigma", self.sigma)

    def drift(self, x, t: float):
        return self.mu * x

    def diffusion(self, x, t: float):
        return self.sigma * x

    def step(self, x, t: float, dt: float, dw):
        if not self.log_euler:
            return super().step(x, t, dt, dw)
        return x * np.exp((self.mu - 0.5 * self.sigma * self.sigma) * dt + self.sigma * dw)


# ------------------------------------
# 2) Mean-reverting short-rate models
# ------------------------------------
@dataclass(frozen=True)
class CoxIngersollRoss(StochasticProcess):
    """``dX = kappa (theta - X) dt + sigma sqrt(X) dW``.

    Full truncation: the square root sees ``max(X, 0)``; the drift and the
    carried state keep the raw value. The trajectory records ``max(X, 0)``.
    """
    kappa: float
    theta: float
    sigma: float

    def __post_init__(self):
        _require_positive("kappa", self.kappa)
        _require_non_negative("sigma", self.sigma)

    def drift(self, x, t: float):
        return self.kappa * (self.theta - x)

    def diffusion(self, x, t: float):
        return self.sigma * np.sqrt(np.maximum(x, 0.0))

    def observe(self, x):
        return np.maximum(x, 0.0)

    @property
    def feller_satisfied(self) -> bool:
        """``2 kappa theta >= sigma^2``: the continuous process never hits zero."""
        return 2.0 * self.kappa * self.theta >= self.sigma * self.sigma


@dataclass(frozen=True)
class OrnsteinUhlenbeck(StochasticProcess):
    """``dX = kappa (theta - X) dt + sigma dW``."""
    kappa: float
    theta: float
    sigma: float

    def __post_init__(self):
        _require_positive("kappa", self.kappa)
        _require_non_negative("sigma", self.sigma)

    def drift(self, x, t: float):
        return self.kappa * (self.theta - x)

    def diffusion(self, x, t: float):
        return self.sigma + np.zeros_like(x, dtype=float)


# ---------------------------------------------
# 3) Short-rate models with time-dependent drift
# ---------------------------------------------
@dataclass(frozen=True)
class HoLee(StochasticProcess):
    """Ho-Lee (1986), ``dX = theta(t) dt + sigma dW``.

    ``theta`` may be a constant or a callable of time.
    """
    theta: Union[float, TimeFunction]
    sigma: float

    def __post_init__(self):
        _require_non_negative("sigma", self.sigma)
        object.__setattr__(self, "theta", _as_time_function(self.theta))

    def drift(self, x, t: float):
        return self.theta(t) + np.zeros_like(x, dtype=float)

    def diffusion(self, x, t: float):
        return self.sigma + np.zeros_like(x, dtype=float)


@dataclass(frozen=True)
class HullWhite(StochasticProcess):
    """Hull-White (1990), ``dX = (theta(t) - alpha X) dt + sigma dW``."""
    alpha: float
    sigma: float
    theta: Union[float, TimeFunction]

    def __post_init__(self):
        _require_positive("alpha", self.alpha)
        _require_non_negative("sigma", self.sigma)
        object.__setattr__(self, "theta", _as_time_function(self.theta))

    def drift(self, x, t: float):
        return self.theta(t) - self.alpha * x

    def diffusion(self, x, t: float):
        return self.sigma + np.zeros_like(x, dtype=float)


@dataclass(frozen=True)
class ExtendedVasicek(StochasticProcess):
    """Extended Vasicek (1990), ``dX = (theta(t) - alpha(t) X) dt + sigma dW``."""
    alpha: Union[float, TimeFunction]
    sigma: float
    theta: Union[float, TimeFunction]

    def __post_init__(self):
        _require_non_negative("sigma", self.sigma)
        object.__setattr__(self, "alpha", _as_time_function(self.alpha))
        object.__setattr__(self, "theta", _as_time_function(self.theta))

    def drift(self, x, t: float):
        return self.theta(t) - self.alpha(t) * x

    def diffusion(self, x, t: float):
        return self.sigma + np.zeros_like(x, dtype=float)


@dataclass(frozen=True)
class BlackDermanToy(StochasticProcess):
    """Black-Derman-Toy (1990) on the log short rate ``Y = ln r``::

        dY = [theta(t) + sigma'(t)/sigma(t) * Y] dt + sigma(t) dW

    Paths hold ``ln r``; use ``np.exp`` on a trajectory to get rates.
    ``sigma_prime`` defaults to a central finite difference of ``sigma``
    with step ``bump``.
    """
    sigma: Union[float, TimeFunction]
    theta: Union[float, TimeFunction]
    sigma_prime: Optional[TimeFunction] = None
    bump: float = field(default=1e-5, repr=False)

    def __post_init__(self):
        _require_positive("bump", self.bump)
        object.__setattr__(self, "sigma", _as_time_function(self.sigma))
        object.__setattr__(self, "theta", _as_time_function(self.theta))

    def _sigma_prime(self, t: float) -> float:
        if self.sigma_prime is not None:
            return self.sigma_prime(t)
        h = self.bump
        return (self.sigma(t + h) - self.sigma(t - h)) / (2.0 * h)

    def drift(self, x, t: float):
        sig = self.sigma(t)
        if sig <= 0:
            raise ValueError(f"sigma(t) must be positive, got {sig} at t={t}")
        return self.theta(t) + self._sigma_prime(t) / sig * x

    def diffusion(self, x, t: float):
        return self.sigma(t) + np.zeros_like(x, dtype=float)


# ---------------------------------------------------------------------------
# 4) Fractional variants (correlated increments, see fractional.py)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FractionalBrownianMotion(StochasticProcess):
    """Fractional Brownian motion, ``dX = dW^H``.

    ``hurst = 0.5`` reduces to standard Brownian motion.
    """
    hurst: float = 0.5

    def __post_init__(self):
        validate_hurst(self.hurst)

    def drift(self, x, t: float):
        return np.zeros_like(x, dtype=float)

    def diffusion(self, x, t: float):
        return np.ones_like(x, dtype=float)


@dataclass(frozen=True)
class FractionalOrnsteinUhlenbeck(StochasticProcess):
    """``dX = kappa (theta - X) dt + sigma dW^H``."""
    kappa: float
    theta: float
    sigma: float
    hurst: float = 0.5

    def __post_init__(self):
        _require_positive("kappa", self.kappa)
        _require_non_negative("sigma", self.sigma)
        validate_hurst(self.hurst)

    def drift(self, x, t: float):
        return self.kappa * (self.theta - x)

    def diffusion(self, x, t: float):
        return self.sigma + np.zeros_like(x, dtype=float)


@dataclass(frozen=True)
class FractionalCoxIngersollRoss(StochasticProcess):
    """``dX = kappa (theta - X) dt + sigma sqrt(X) dW^H``, full truncation as CIR."""
    kappa: float
    theta: float
    sigma: float
    hurst: float = 0.5

    def __post_init__(self):
        _require_positive("kappa", self.kappa)
        _require_non_negative("sigma", self.sigma)
        validate_hurst(self.hurst)

    def drift(self, x, t: float):
        return self.kappa * (self.theta - x)

    def diffusion(self, x, t: float):
        return self.sigma * np.sqrt(np.maximum(x, 0.0))

    def observe(self, x):
        return np.maximum(x, 0.0)
