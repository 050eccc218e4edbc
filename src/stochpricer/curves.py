# curves.py
# Nelson-Siegel (1987) yield curve.
#
# Rates are continuously compounded decimals. Every query is relative to
# the curve's explicit valuation date; there is no implicit "today".

from __future__ import annotations
from dataclasses import dataclass
from datetime import date

import numpy as np

from .dates import year_fraction

__all__ = ["NelsonSiegel"]


@dataclass(frozen=True)
class NelsonSiegel:
    """Nelson-Siegel curve.

    Instantaneous forward rate at maturity ``tau``::

        f(tau) = beta0 + beta1 * e^{-tau/lambda} + beta2 * (tau/lambda) * e^{-tau/lambda}

    Parameters
    ----------
    beta0, beta1, beta2 : float
        Level, slope and curvature.
    lambda_ : float
        Decay scale in years (> 0).
    valuation_date : datetime.date
        Curve anchor date.
    convention : str
        Day count for turning dates into ``tau``.
    """
    beta0: float
    beta1: float
    beta2: float
    lambda_: float
    valuation_date: date
    convention: str = "act/365f"

    def __post_init__(self):
        if self.lambda_ <= 0:
            raise ValueError(f"lambda_ must be positive, got {self.lambda_}")

    def _tau(self, d: date) -> float:
        if d <= self.valuation_date:
            raise ValueError(f"date {d} must be after valuation date {self.valuation_date}")
        return year_fraction(self.valuation_date, d, self.convention)

    def forward_rate(self, d: date) -> float:
        tau = self._tau(d)
        x = tau / self.lambda_
        e = np.exp(-x)
        return float(self.beta0 + self.beta1 * e + self.beta2 * x * e)

    def spot_rate(self, d: date) -> float:
        """Zero rate to ``d`` (average of the forward curve up to ``d``)."""
        tau = self._tau(d)
        x = tau / self.lambda_
        e = np.exp(-x)
        loading = (1.0 - e) / x
        return float(self.beta0 + self.beta1 * loading + self.beta2 * (loading - e))

    def discount_factor(self, d: date) -> float:
        tau = self._tau(d)
        return float(np.exp(-self.spot_rate(d) * tau))

    def calibrate(self, market_dates, market_rates) -> NelsonSiegel:
        """Fitting to market quotes is not implemented."""
        raise NotImplementedError("Nelson-Siegel calibration to market data is not implemented")
