# stochpricer: stochastic process simulation and Monte Carlo pricing
# Public API

# Configuration
from .core import SimulationConfig, CALL, PUT

# Stochastic processes
from .processes import (
    StochasticProcess,
    BrownianMotion, ArithmeticBrownianMotion, GeometricBrownianMotion,
    CoxIngersollRoss, OrnsteinUhlenbeck,
    HoLee, HullWhite, ExtendedVasicek, BlackDermanToy,
    FractionalBrownianMotion, FractionalOrnsteinUhlenbeck, FractionalCoxIngersollRoss,
)

# Discretisation engine
from .engine import simulate
from .trajectories import Trajectories

# Payoffs & Monte Carlo pricing
from .payoffs import Payoff, VanillaPayoff, AsianPayoff
from .monte_carlo import MonteCarloResult, price_monte_carlo, price_trajectories

# Contracts & pricers
from .instruments import (
    Instrument, EuropeanOption, AsianOption,
    MonteCarloPricer, AnalyticOptionPricer,
)

# Analytic models
from .black_scholes import (
    Greek, GeneralisedBlackScholesMerton,
    black_scholes_73, merton_73, black_76, asay_82, garman_kohlhagen_83,
)

# Curves & calendar
from .curves import NelsonSiegel
from .dates import year_fraction

# Diagnostics
from .validation import convergence_analysis

__all__ = [
    # Configuration
    "SimulationConfig", "CALL", "PUT",
    # Processes
    "StochasticProcess",
    "BrownianMotion", "ArithmeticBrownianMotion", "GeometricBrownianMotion",
    "CoxIngersollRoss", "OrnsteinUhlenbeck",
    "HoLee", "HullWhite", "ExtendedVasicek", "BlackDermanToy",
    "FractionalBrownianMotion", "FractionalOrnsteinUhlenbeck", "FractionalCoxIngersollRoss",
    # Engine
    "simulate", "Trajectories",
    # Pricing
    "Payoff", "VanillaPayoff", "AsianPayoff",
    "MonteCarloResult", "price_monte_carlo", "price_trajectories",
    # Contracts
    "Instrument", "EuropeanOption", "AsianOption",
    "MonteCarloPricer", "AnalyticOptionPricer",
    # Analytic
    "Greek", "GeneralisedBlackScholesMerton",
    "black_scholes_73", "merton_73", "black_76", "asay_82", "garman_kohlhagen_83",
    # Curves & calendar
    "NelsonSiegel", "year_fraction",
    # Diagnostics
    "convergence_analysis",
]

__version__ = "0.1.0"
