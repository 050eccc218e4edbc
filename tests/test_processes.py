"""Tests for process drift/diffusion definitions and parameter validation."""

import math
import numpy as np
import pytest

from stochpricer.processes import (
    StochasticProcess,
    BrownianMotion, ArithmeticBrownianMotion, GeometricBrownianMotion,
    CoxIngersollRoss, OrnsteinUhlenbeck,
    HoLee, HullWhite, ExtendedVasicek, BlackDermanToy,
    FractionalBrownianMotion, FractionalOrnsteinUhlenbeck, FractionalCoxIngersollRoss,
)

X = np.array([-0.5, 0.0, 0.5, 2.0])


# ---------------------------------------------------------------------------
# Coefficients
# ---------------------------------------------------------------------------
class TestCoefficients:
    def test_brownian(self):
        p = BrownianMotion()
        np.testing.assert_array_equal(p.drift(X, 0.0), np.zeros(4))
        np.testing.assert_array_equal(p.diffusion(X, 0.0), np.ones(4))
        assert p.hurst is None

    def test_abm_broadcasts(self):
        p = ArithmeticBrownianMotion(mu=0.3, sigma=1.5)
        np.testing.assert_allclose(p.drift(X, 1.0), np.full(4, 0.3))
        np.testing.assert_allclose(p.diffusion(X, 1.0), np.full(4, 1.5))

    def test_gbm(self):
        p = GeometricBrownianMotion(mu=0.05, sigma=0.2)
        np.testing.assert_allclose(p.drift(X, 0.0), 0.05 * X)
        np.testing.assert_allclose(p.diffusion(X, 0.0), 0.2 * X)

    def test_ou(self):
        p = OrnsteinUhlenbeck(kappa=2.0, theta=1.0, sigma=0.3)
        np.testing.assert_allclose(p.drift(X, 0.0), 2.0 * (1.0 - X))
        np.testing.assert_allclose(p.diffusion(X, 0.0), np.full(4, 0.3))

    def test_cir_diffusion_truncates(self):
        p = CoxIngersollRoss(kappa=1.0, theta=0.04, sigma=0.5)
        np.testing.assert_allclose(p.diffusion(X, 0.0), 0.5 * np.sqrt([0.0, 0.0, 0.5, 2.0]))
        # drift sees the raw state
        np.testing.assert_allclose(p.drift(X, 0.0), 0.04 - X)

    def test_scalar_input(self):
        p = CoxIngersollRoss(kappa=1.0, theta=0.04, sigma=0.5)
        assert float(p.diffusion(0.25, 0.0)) == pytest.approx(0.25)


class TestTimeDependent:
    def test_ho_lee_constant_theta_is_wrapped(self):
        p = HoLee(theta=0.01, sigma=0.02)
        assert callable(p.theta)
        np.testing.assert_allclose(p.drift(X, 3.0), np.full(4, 0.01))

    def test_ho_lee_callable_theta(self):
        p = HoLee(theta=lambda t: 0.01 * t, sigma=0.02)
        np.testing.assert_allclose(p.drift(X, 2.0), np.full(4, 0.02))

    def test_hull_white(self):
        p = HullWhite(alpha=0.5, sigma=0.01, theta=lambda t: 0.02 + t)
        np.testing.assert_allclose(p.drift(X, 1.0), 1.02 - 0.5 * X)

    def test_extended_vasicek(self):
        p = ExtendedVasicek(alpha=lambda t: 1.0 + t, sigma=0.01, theta=0.03)
        np.testing.assert_allclose(p.drift(X, 1.0), 0.03 - 2.0 * X)

    def test_bdt_numeric_sigma_prime(self):
        p = BlackDermanToy(sigma=lambda t: 0.1 + 0.05 * t, theta=0.0)
        y = np.array([math.log(0.05)])
        expected = 0.05 / (0.1 + 0.05 * 1.0) * y
        np.testing.assert_allclose(p.drift(y, 1.0), expected, rtol=1e-6)
        np.testing.assert_allclose(p.diffusion(y, 1.0), [0.15])

    def test_bdt_constant_sigma_has_no_reversion(self):
        p = BlackDermanToy(sigma=0.2, theta=0.01)
        np.testing.assert_allclose(p.drift(X, 0.0), np.full(4, 0.01))

    def test_bdt_explicit_sigma_prime(self):
        p = BlackDermanToy(sigma=lambda t: 0.2, theta=0.0, sigma_prime=lambda t: 0.1)
        np.testing.assert_allclose(p.drift(np.array([1.0]), 0.0), [0.5])

    def test_bdt_non_positive_sigma_rejected(self):
        p = BlackDermanToy(sigma=lambda t: 0.1 - t, theta=0.0)
        with pytest.raises(ValueError, match="sigma"):
            p.drift(X, 1.0)


class TestFractional:
    def test_hurst_exposed(self):
        assert FractionalBrownianMotion(0.7).hurst == 0.7
        assert FractionalOrnsteinUhlenbeck(1.0, 0.0, 0.2, hurst=0.3).hurst == 0.3
        assert FractionalCoxIngersollRoss(1.0, 0.04, 0.2).hurst == 0.5

    @pytest.mark.parametrize("h", [0.0, 1.0, -0.2, 1.5])
    def test_hurst_outside_unit_interval_rejected(self, h):
        with pytest.raises(ValueError, match="hurst"):
            FractionalBrownianMotion(h)

    def test_fractional_cir_observes_clamped(self):
        p = FractionalCoxIngersollRoss(1.0, 0.04, 0.2, hurst=0.6)
        np.testing.assert_array_equal(p.observe(X), [0.0, 0.0, 0.5, 2.0])


# ---------------------------------------------------------------------------
# Step rule
# ---------------------------------------------------------------------------
class TestStep:
    def test_euler_update(self):
        p = OrnsteinUhlenbeck(kappa=2.0, theta=1.0, sigma=0.3)
        x = np.array([0.0, 2.0])
        dw = np.array([0.1, -0.1])
        np.testing.assert_allclose(p.step(x, 0.0, 0.01, dw), x + 2.0 * (1.0 - x) * 0.01 + 0.3 * dw)

    def test_gbm_log_euler(self):
        p = GeometricBrownianMotion(mu=0.05, sigma=0.2)
        out = p.step(np.array([100.0]), 0.0, 1.0, np.array([0.5]))
        np.testing.assert_allclose(out, 100.0 * np.exp(0.05 - 0.02 + 0.1))

    def test_gbm_plain_euler(self):
        p = GeometricBrownianMotion(mu=0.05, sigma=0.2, log_euler=False)
        out = p.step(np.array([100.0]), 0.0, 1.0, np.array([0.5]))
        np.testing.assert_allclose(out, 100.0 + 5.0 + 20.0 * 0.5)

    def test_cir_carries_unclamped_state(self):
        p = CoxIngersollRoss(kappa=1.0, theta=0.04, sigma=0.5)
        x = np.array([0.01])
        nxt = p.step(x, 0.0, 0.01, np.array([-1.0]))
        assert nxt[0] < 0.0
        assert p.observe(nxt)[0] == 0.0

    def test_cir_feller(self):
        assert CoxIngersollRoss(2.0, 0.04, 0.3).feller_satisfied
        assert not CoxIngersollRoss(0.5, 0.04, 0.5).feller_satisfied


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
class TestValidation:
    @pytest.mark.parametrize("factory", [
        lambda: ArithmeticBrownianMotion(0.0, -1.0),
        lambda: GeometricBrownianMotion(0.05, -0.2),
        lambda: OrnsteinUhlenbeck(1.0, 0.0, -0.1),
        lambda: CoxIngersollRoss(1.0, 0.04, -0.1),
        lambda: HoLee(0.01, -0.02),
        lambda: HullWhite(0.1, -0.01, 0.0),
        lambda: ExtendedVasicek(0.1, -0.01, 0.0),
    ])
    def test_negative_sigma_rejected(self, factory):
        with pytest.raises(ValueError, match="sigma"):
            factory()

    @pytest.mark.parametrize("cls", [CoxIngersollRoss, OrnsteinUhlenbeck,
                                     FractionalOrnsteinUhlenbeck, FractionalCoxIngersollRoss])
    def test_non_positive_kappa_rejected(self, cls):
        with pytest.raises(ValueError, match="kappa"):
            cls(0.0, 0.04, 0.2)

    def test_hull_white_alpha(self):
        with pytest.raises(ValueError, match="alpha"):
            HullWhite(0.0, 0.01, 0.0)

    def test_immutable(self):
        p = OrnsteinUhlenbeck(1.0, 0.0, 0.2)
        with pytest.raises(AttributeError):
            p.kappa = 2.0

    def test_abstract_base(self):
        with pytest.raises(TypeError):
            StochasticProcess()
