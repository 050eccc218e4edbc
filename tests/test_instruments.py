"""Tests for option contracts and the Instrument pricers."""

from datetime import date

import numpy as np
import pytest

from stochpricer.black_scholes import Greek, black_scholes_73
from stochpricer.core import SimulationConfig, CALL, PUT
from stochpricer.instruments import (
    AnalyticOptionPricer, AsianOption, EuropeanOption, Instrument, MonteCarloPricer,
)
from stochpricer.payoffs import ARITHMETIC_DISCRETE, FIXED, FLOATING
from stochpricer.processes import GeometricBrownianMotion

VAL = date(2024, 1, 2)
EXPIRY = date(2025, 1, 1)          # 365 days: T = 1.0 under act/365f
r, sigma = 0.05, 0.20
GBM = GeometricBrownianMotion(r, sigma)


class TestContracts:
    def test_european_payoff(self):
        call = EuropeanOption(100.0, EXPIRY, CALL)
        put = EuropeanOption(100.0, EXPIRY, PUT)
        assert call.payoff(110.0) == 10.0
        assert call.payoff(90.0) == 0.0
        assert put.payoff(90.0) == 10.0
        assert put.evaluate(np.array([100.0, 95.0, 80.0])) == 20.0

    def test_european_validation(self):
        with pytest.raises(ValueError, match="strike"):
            EuropeanOption(-5.0, EXPIRY)
        with pytest.raises(ValueError, match="kind"):
            EuropeanOption(100.0, EXPIRY, "binary")

    def test_asian_validation(self):
        with pytest.raises(ValueError, match="strike"):
            AsianOption(EXPIRY, CALL, ARITHMETIC_DISCRETE, FIXED)
        floating = AsianOption(EXPIRY, CALL, ARITHMETIC_DISCRETE, FLOATING)
        assert floating.evaluate(np.array([100.0, 90.0, 120.0])) == pytest.approx(15.0)

    def test_time_to_expiry(self):
        opt = EuropeanOption(100.0, EXPIRY)
        assert opt.time_to_expiry(VAL) == pytest.approx(1.0)
        with pytest.raises(ValueError, match="expiry"):
            opt.time_to_expiry(EXPIRY)

    def test_contracts_are_frozen(self):
        opt = EuropeanOption(100.0, EXPIRY)
        with pytest.raises(AttributeError):
            opt.strike = 90.0

    def test_contract_monte_carlo(self):
        opt = EuropeanOption(100.0, EXPIRY)
        cfg = SimulationConfig.for_expiry(100.0, VAL, EXPIRY, 1, 50_000)
        res = opt.price_monte_carlo(GBM, cfg, r, valuation_date=VAL, seed=3)
        assert abs(res.price() - 10.4506) < 4 * res.error()

    def test_horizon_mismatch_rejected(self):
        opt = EuropeanOption(100.0, EXPIRY)
        cfg = SimulationConfig(100.0, 0.0, 0.5, 1, 10)
        with pytest.raises(ValueError, match="horizon"):
            opt.price_monte_carlo(GBM, cfg, r, valuation_date=VAL, seed=3)

    def test_check_horizon_returns_time_to_expiry(self):
        opt = EuropeanOption(100.0, EXPIRY)
        cfg = SimulationConfig.for_expiry(100.0, VAL, EXPIRY, 4, 10)
        assert opt.check_horizon(cfg, VAL) == pytest.approx(1.0)


class TestMonteCarloPricer:
    def test_instrument_interface(self):
        opt = EuropeanOption(100.0, EXPIRY, PUT)
        cfg = SimulationConfig.for_expiry(100.0, VAL, EXPIRY, 1, 50_000)
        pricer = MonteCarloPricer(opt, GBM, cfg, r, VAL, seed=11)
        assert isinstance(pricer, Instrument)
        assert pricer.valuation_date() == VAL
        assert pricer.instrument_type() == "EuropeanOption"
        assert abs(pricer.price() - 5.5735) < 4 * pricer.error()

    def test_runs_once(self):
        opt = AsianOption(EXPIRY, CALL, ARITHMETIC_DISCRETE, FIXED, strike=100.0)
        cfg = SimulationConfig.for_expiry(100.0, VAL, EXPIRY, 12, 1000)
        pricer = MonteCarloPricer(opt, GBM, cfg, r, VAL, seed=11)
        assert pricer.result() is pricer.result()
        assert pricer.instrument_type() == "AsianOption"

    def test_wrong_maturity_config_rejected(self):
        # six-month option against a five-year simulation window
        opt = EuropeanOption(100.0, date(2024, 7, 1))
        cfg = SimulationConfig(100.0, 0.0, 5.0, 1, 20_000)
        with pytest.raises(ValueError, match="horizon"):
            MonteCarloPricer(opt, GBM, cfg, r, date(2024, 1, 1), seed=11)

    def test_expired_option_rejected(self):
        opt = EuropeanOption(100.0, VAL)
        cfg = SimulationConfig(100.0, 0.0, 1.0, 1, 10)
        with pytest.raises(ValueError, match="expiry"):
            MonteCarloPricer(opt, GBM, cfg, r, VAL)


class TestAnalyticOptionPricer:
    def test_price_and_error(self):
        pricer = AnalyticOptionPricer(EuropeanOption(100.0, EXPIRY), black_scholes_73(100.0, r, sigma), VAL)
        assert pricer.price() == pytest.approx(10.4506, abs=1e-4)
        assert pricer.error() is None
        assert pricer.valuation_date() == VAL

    def test_greek_and_report(self):
        pricer = AnalyticOptionPricer(EuropeanOption(100.0, EXPIRY), black_scholes_73(100.0, r, sigma), VAL)
        assert pricer.greek(Greek.DELTA) == pytest.approx(0.636831, abs=1e-6)
        report = pricer.report()
        assert report["price"] == pytest.approx(pricer.price())
        assert len(report) == 14

    def test_rejects_path_dependent(self):
        asian = AsianOption(EXPIRY, CALL, ARITHMETIC_DISCRETE, FLOATING)
        with pytest.raises(TypeError):
            AnalyticOptionPricer(asian, black_scholes_73(100.0, r, sigma), VAL)
