# black_scholes.py
# Generalised Black-Scholes-Merton prices and Greeks (closed form).
#
# One model, parametrised by cost of carry b, covers the classic variants:
#   Black-Scholes (1973)        b = r
#   Merton (1973)               b = r - q
#   Black (1976)                b = 0
#   Asay (1982)                 b = 0, r = 0
#   Garman-Kohlhagen (1983)     b = r_d - r_f
# Strike and expiry accept scalars or NumPy arrays and broadcast.

from __future__ import annotations
import numpy as np
from dataclasses import dataclass
from enum import Enum
from scipy.stats import norm

from .core import CALL, PUT

__all__ = [
    "Greek",
    "GeneralisedBlackScholesMerton",
    "black_scholes_73",
    "merton_73",
    "black_76",
    "asay_82",
    "garman_kohlhagen_83",
]

_N = norm.cdf   # vectorised standard-normal CDF
_n = norm.pdf   # vectorised standard-normal PDF

# How the price responds to the discount rate r.
RHO_CARRY   = "carry"     # b moves one-for-one with r (spot models)
RHO_FUTURES = "futures"   # b fixed at 0, only discounting moves
RHO_NONE    = "none"      # fully margined, no discounting


class Greek(str, Enum):
    DELTA  = "delta"
    GAMMA  = "gamma"
    THETA  = "theta"
    VEGA   = "vega"
    RHO    = "rho"
    VANNA  = "vanna"
    CHARM  = "charm"
    LAMBDA = "lambda"
    ZOMMA  = "zomma"
    SPEED  = "speed"
    COLOR  = "color"
    VOMMA  = "vomma"
    ULTIMA = "ultima"


@dataclass(frozen=True)
class _Terms:
    S: float
    K: np.ndarray
    T: np.ndarray
    r: float
    b: float
    sigma: float
    d1: np.ndarray
    d2: np.ndarray
    carry: np.ndarray   # e^{(b-r)T}
    disc: np.ndarray    # e^{-rT}
    sqrt_T: np.ndarray


def _out(x):
    x = np.asarray(x, dtype=float)
    return float(x) if x.ndim == 0 else x


@dataclass(frozen=True)
class GeneralisedBlackScholesMerton:
    """Black-Scholes-Merton model with cost of carry.

    Parameters
    ----------
    underlying : float
        Spot (or forward, for Black-76 / Asay-82).
    rate : float
        Continuously-compounded discount rate r.
    cost_of_carry : float
        b in the generalised model.
    volatility : float
        Lognormal volatility sigma (> 0).
    rho_mode : str
        ``"carry"``, ``"futures"`` or ``"none"``; see module constants.
    """
    underlying: float
    rate: float
    cost_of_carry: float
    volatility: float
    rho_mode: str = RHO_CARRY

    def __post_init__(self):
        if self.underlying <= 0:
            raise ValueError(f"underlying must be positive, got {self.underlying}")
        if self.volatility <= 0:
            raise ValueError(f"volatility must be positive, got {self.volatility}")
        if self.rho_mode not in (RHO_CARRY, RHO_FUTURES, RHO_NONE):
            raise ValueError(f"rho_mode must be 'carry', 'futures' or 'none', got {self.rho_mode!r}")

    # ------------------------------------------------------------------
    def _terms(self, K, T) -> _Terms:
        K, T = np.asarray(K, dtype=float), np.asarray(T, dtype=float)
        if np.any(K <= 0):
            raise ValueError("strike must be positive")
        if np.any(T <= 0):
            raise ValueError("time to expiry must be positive")
        S, r, b, sigma = self.underlying, self.rate, self.cost_of_carry, self.volatility
        sqrt_T = np.sqrt(T)
        vs = sigma * sqrt_T
        d1 = (np.log(S / K) + (b + 0.5 * sigma * sigma) * T) / vs
        d2 = d1 - vs
        return _Terms(S, K, T, r, b, sigma, d1, d2,
                      np.exp((b - r) * T), np.exp(-r * T), sqrt_T)

    @staticmethod
    def _is_call(kind: str) -> bool:
        if kind not in (CALL, PUT):
            raise ValueError(f"kind must be 'call' or 'put', got {kind!r}")
        return kind == CALL

    @staticmethod
    def _price(t: _Terms, is_call: bool):
        if is_call:
            return t.S * t.carry * _N(t.d1) - t.K * t.disc * _N(t.d2)
        return t.K * t.disc * _N(-t.d2) - t.S * t.carry * _N(-t.d1)

    # ------------------------------------------------------------------
    def price(self, strike, T, kind: str = CALL):
        """Option price for strike(s) ``strike`` and expiry(ies) ``T``."""
        return _out(self._price(self._terms(strike, T), self._is_call(kind)))

    def greek(self, which, strike, T, kind: str = CALL):
        """Closed-form sensitivity selected by ``which`` (a :class:`Greek` or its name).

        Theta, charm and color are derivatives with respect to calendar
        time (minus the derivative in ``T``); vega and its relatives are per
        unit of volatility, rho per unit of rate.
        """
        which = Greek(which)
        t = self._terms(strike, T)
        is_call = self._is_call(kind)
        return _out(_GREEK_FUNCS[which](self, t, is_call))

    def greeks(self, strike, T, kind: str = CALL) -> dict[str, float]:
        return {g.value: self.greek(g, strike, T, kind) for g in Greek}


# ---------------------------------------------------------------------------
# Greek formulas (Haug, "The Complete Guide to Option Pricing Formulas")
# ---------------------------------------------------------------------------
def _delta(m, t, is_call):
    return t.carry * (_N(t.d1) if is_call else _N(t.d1) - 1.0)


def _gamma(m, t, is_call):
    return t.carry * _n(t.d1) / (t.S * t.sigma * t.sqrt_T)


def _vega(m, t, is_call):
    return t.S * t.carry * _n(t.d1) * t.sqrt_T


def _theta(m, t, is_call):
    decay = -t.S * t.carry * _n(t.d1) * t.sigma / (2.0 * t.sqrt_T)
    if is_call:
        return (decay - (t.b - t.r) * t.S * t.carry * _N(t.d1)
                - t.r * t.K * t.disc * _N(t.d2))
    return (decay + (t.b - t.r) * t.S * t.carry * _N(-t.d1)
            + t.r * t.K * t.disc * _N(-t.d2))


def _rho(m, t, is_call):
    if m.rho_mode == RHO_NONE:
        return np.zeros_like(t.d1)
    if m.rho_mode == RHO_FUTURES:
        return -t.T * m._price(t, is_call)
    if is_call:
        return t.T * t.K * t.disc * _N(t.d2)
    return -t.T * t.K * t.disc * _N(-t.d2)


def _vanna(m, t, is_call):
    return -t.carry * _n(t.d1) * t.d2 / t.sigma


def _charm(m, t, is_call):
    shape = _n(t.d1) * (t.b / (t.sigma * t.sqrt_T) - t.d2 / (2.0 * t.T))
    if is_call:
        return -t.carry * (shape + (t.b - t.r) * _N(t.d1))
    return -t.carry * (shape - (t.b - t.r) * _N(-t.d1))


def _lambda(m, t, is_call):
    return _delta(m, t, is_call) * t.S / m._price(t, is_call)


def _zomma(m, t, is_call):
    return _gamma(m, t, is_call) * (t.d1 * t.d2 - 1.0) / t.sigma


def _speed(m, t, is_call):
    return -_gamma(m, t, is_call) / t.S * (1.0 + t.d1 / (t.sigma * t.sqrt_T))


def _color(m, t, is_call):
    return _gamma(m, t, is_call) * (
        t.r - t.b + t.b * t.d1 / (t.sigma * t.sqrt_T) + (1.0 - t.d1 * t.d2) / (2.0 * t.T)
    )


def _vomma(m, t, is_call):
    return _vega(m, t, is_call) * t.d1 * t.d2 / t.sigma


def _ultima(m, t, is_call):
    d1d2 = t.d1 * t.d2
    return -_vega(m, t, is_call) / t.sigma ** 2 * (
        d1d2 * (1.0 - d1d2) + t.d1 * t.d1 + t.d2 * t.d2
    )


_GREEK_FUNCS = {
    Greek.DELTA: _delta,
    Greek.GAMMA: _gamma,
    Greek.THETA: _theta,
    Greek.VEGA: _vega,
    Greek.RHO: _rho,
    Greek.VANNA: _vanna,
    Greek.CHARM: _charm,
    Greek.LAMBDA: _lambda,
    Greek.ZOMMA: _zomma,
    Greek.SPEED: _speed,
    Greek.COLOR: _color,
    Greek.VOMMA: _vomma,
    Greek.ULTIMA: _ultima,
}


# ---------------------------------------------------------------------------
# Model constructors
# ---------------------------------------------------------------------------
def black_scholes_73(spot: float, rate: float, volatility: float) -> GeneralisedBlackScholesMerton:
    """Non-dividend stock options, b = r."""
    return GeneralisedBlackScholesMerton(spot, rate, rate, volatility)


def merton_73(spot: float, rate: float, dividend_yield: float, volatility: float) -> GeneralisedBlackScholesMerton:
    """Stock paying a continuous dividend yield q, b = r - q."""
    return GeneralisedBlackScholesMerton(spot, rate, rate - dividend_yield, volatility)


def black_76(forward: float, rate: float, volatility: float) -> GeneralisedBlackScholesMerton:
    """Options on futures / forwards, b = 0."""
    return GeneralisedBlackScholesMerton(forward, rate, 0.0, volatility, RHO_FUTURES)


def asay_82(forward: float, volatility: float) -> GeneralisedBlackScholesMerton:
    """Margined options on futures, b = 0 and r = 0."""
    return GeneralisedBlackScholesMerton(forward, 0.0, 0.0, volatility, RHO_NONE)


def garman_kohlhagen_83(
    spot: float, domestic_rate: float, foreign_rate: float, volatility: float
) -> GeneralisedBlackScholesMerton:
    """FX options, b = r_d - r_f."""
    return GeneralisedBlackScholesMerton(spot, domestic_rate, domestic_rate - foreign_rate, volatility)
