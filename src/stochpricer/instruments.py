"""Option contracts and the pricers that value them.

Contracts validate their fields at construction and double as payoff
capabilities for the Monte Carlo engine. Pricers bind a contract to a
model and an explicit valuation date and expose the common
:class:`Instrument` interface (``price``, ``error``, ``valuation_date``,
``instrument_type``).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

import numpy as np

from .black_scholes import GeneralisedBlackScholesMerton, Greek
from .core import CALL, SimulationConfig
from .dates import year_fraction
from .monte_carlo import MonteCarloResult, price_monte_carlo
from .payoffs import (
    ARITHMETIC_DISCRETE,
    FIXED,
    AsianPayoff,
    Payoff,
    VanillaPayoff,
)
from .processes import StochasticProcess

__all__ = [
    "Instrument",
    "EuropeanOption",
    "AsianOption",
    "MonteCarloPricer",
    "AnalyticOptionPricer",
]

logger = logging.getLogger(__name__)


class Instrument(ABC):
    """Anything that can report a value and, optionally, its error."""

    @abstractmethod
    def price(self) -> float:
        """Net present value."""

    @abstractmethod
    def error(self) -> Optional[float]:
        """Statistical error of :meth:`price`, or ``None`` if the method has none."""

    @abstractmethod
    def valuation_date(self) -> date:
        """Date the value refers to."""

    def instrument_type(self) -> str:
        return type(self).__name__


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------
class _OptionContract(Payoff):
    expiry: date
    kind: str

    def time_to_expiry(self, valuation_date: date, convention: str = "act/365f") -> float:
        """Year fraction from ``valuation_date`` to expiry (must be positive)."""
        if self.expiry <= valuation_date:
            raise ValueError(f"expiry {self.expiry} must be after valuation date {valuation_date}")
        return year_fraction(valuation_date, self.expiry, convention)

    def check_horizon(self, config: SimulationConfig, valuation_date: date) -> float:
        """Time to expiry, after checking ``config`` simulates exactly up to it."""
        T = self.time_to_expiry(valuation_date)
        if not np.isclose(config.horizon, T, rtol=1e-9, atol=1e-12):
            raise ValueError(
                f"config horizon {config.horizon:.6f} differs from time to expiry {T:.6f}; "
                f"build the config with SimulationConfig.for_expiry"
            )
        return T

    def evaluate(self, paths):
        return self._payoff.evaluate(paths)

    def price_monte_carlo(
        self,
        process: StochasticProcess,
        config: SimulationConfig,
        rate: float,
        *,
        valuation_date: Optional[date] = None,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None,
    ) -> MonteCarloResult:
        """Monte Carlo value of this contract under ``process``.

        With ``valuation_date`` the config horizon must equal the time
        to expiry, otherwise ``ValueError`` is raised before simulating.
        """
        if valuation_date is not None:
            self.check_horizon(config, valuation_date)
        return price_monte_carlo(self, process, config, rate, seed=seed, max_workers=max_workers)


@dataclass(frozen=True)
class EuropeanOption(_OptionContract):
    """European vanilla call or put.

    Parameters
    ----------
    strike : float
        Strike price (> 0).
    expiry : datetime.date
        Expiry date.
    kind : str
        ``"call"`` or ``"put"``.
    """
    strike: float
    expiry: date
    kind: str = CALL

    def __post_init__(self):
        # VanillaPayoff validates strike and kind
        object.__setattr__(self, "_payoff", VanillaPayoff(self.strike, self.kind))

    def payoff(self, underlying):
        """Payoff on a terminal value (scalar or array)."""
        return self._payoff.payoff(underlying)


@dataclass(frozen=True)
class AsianOption(_OptionContract):
    """European Asian option on the path average.

    ``strike`` is required for fixed-strike contracts and ignored for
    floating-strike ones, where the average plays the strike.
    """
    expiry: date
    kind: str = CALL
    averaging: str = ARITHMETIC_DISCRETE
    strike_type: str = FIXED
    strike: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(
            self, "_payoff",
            AsianPayoff(self.kind, self.averaging, self.strike_type, self.strike),
        )


# ---------------------------------------------------------------------------
# Pricers
# ---------------------------------------------------------------------------
class MonteCarloPricer(Instrument):
    """Monte Carlo valuation of a contract as of ``valuation_date``.

    The simulation runs once, on the first call to :meth:`result`,
    :meth:`price` or :meth:`error`, so both figures come from the same
    ensemble. Paths are not kept.
    """

    def __init__(
        self,
        option: _OptionContract,
        process: StochasticProcess,
        config: SimulationConfig,
        rate: float,
        valuation_date: date,
        *,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        option.check_horizon(config, valuation_date)
        self.option = option
        self.process = process
        self.config = config
        self.rate = rate
        self._valuation_date = valuation_date
        self.seed = seed
        self.max_workers = max_workers
        self._result: Optional[MonteCarloResult] = None

    def result(self) -> MonteCarloResult:
        if self._result is None:
            self._result = self.option.price_monte_carlo(
                self.process, self.config, self.rate,
                valuation_date=self._valuation_date, seed=self.seed, max_workers=self.max_workers,
            )
        return self._result

    def price(self) -> float:
        return self.result().price()

    def error(self) -> Optional[float]:
        return self.result().error()

    def valuation_date(self) -> date:
        return self._valuation_date

    def instrument_type(self) -> str:
        return type(self.option).__name__


class AnalyticOptionPricer(Instrument):
    """Closed-form valuation of a :class:`EuropeanOption`."""

    def __init__(
        self,
        option: EuropeanOption,
        model: GeneralisedBlackScholesMerton,
        valuation_date: date,
        *,
        convention: str = "act/365f",
    ):
        if not isinstance(option, EuropeanOption):
            raise TypeError(f"analytic pricing needs a EuropeanOption, got {type(option).__name__}")
        self.option = option
        self.model = model
        self._valuation_date = valuation_date
        self.T = option.time_to_expiry(valuation_date, convention)

    def price(self) -> float:
        return self.model.price(self.option.strike, self.T, self.option.kind)

    def error(self) -> Optional[float]:
        return None

    def greek(self, which) -> float:
        """Sensitivity selected by a :class:`Greek` or its name."""
        return self.model.greek(which, self.option.strike, self.T, self.option.kind)

    def valuation_date(self) -> date:
        return self._valuation_date

    def instrument_type(self) -> str:
        return type(self.option).__name__

    def report(self) -> dict[str, float]:
        """Price plus every Greek, keyed by name."""
        out = {"price": self.price()}
        out.update({g.value: self.greek(g) for g in Greek})
        logger.debug("%s report: %s", self.instrument_type(), out)
        return out
