"""
mc-option-pricing: Monte Carlo pricing of European options under Black-Scholes.

Quick Start
-----------
>>> from mc_option_pricing import CallPayoff, ModelParameters, MonteCarloEngine
>>> params = ModelParameters(spot=100.0, volatility=0.20, rate=0.05, expiry=1.0)
>>> engine = MonteCarloEngine(method="polar", seed=42)
>>> result = engine.run(CallPayoff(strike=105.0), params, 100_000)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Payoffs
# =============================================================================
from mc_option_pricing.options.payoffs.base import (
    CallPayoff,
    OptionType,
    Payoff,
    PutPayoff,
    make_payoff,
)

# =============================================================================
# Simulation
# =============================================================================
from mc_option_pricing.options.simulation import (
    CosineSampler,
    DirectTerminalGenerator,
    GaussianSampler,
    ModelParameters,
    MonteCarloEngine,
    MonthlyAveragedGenerator,
    PathStrategy,
    PolarSampler,
    RunningStatistics,
    SamplingMethod,
    SimulationResult,
    SummationSampler,
    convergence_analysis,
    make_path_generator,
    make_sampler,
    price_vanilla_mc,
)

# =============================================================================
# Analytical Pricing
# =============================================================================
from mc_option_pricing.options.pricing import (
    black_scholes_call,
    black_scholes_price,
    black_scholes_put,
)

# =============================================================================
# Errors and Configuration
# =============================================================================
from mc_option_pricing.errors import (
    InvalidArgumentError,
    NumericDegeneracyError,
    PricingError,
)
from mc_option_pricing.config.settings import SETTINGS

__all__ = [
    # Version
    "__version__",
    # Payoffs
    "OptionType",
    "CallPayoff",
    "PutPayoff",
    "Payoff",
    "make_payoff",
    # Sampling
    "GaussianSampler",
    "SamplingMethod",
    "SummationSampler",
    "PolarSampler",
    "CosineSampler",
    "make_sampler",
    # Paths
    "ModelParameters",
    "PathStrategy",
    "DirectTerminalGenerator",
    "MonthlyAveragedGenerator",
    "make_path_generator",
    # Engine
    "MonteCarloEngine",
    "RunningStatistics",
    "SimulationResult",
    "price_vanilla_mc",
    "convergence_analysis",
    # Analytical
    "black_scholes_call",
    "black_scholes_put",
    "black_scholes_price",
    # Errors
    "PricingError",
    "InvalidArgumentError",
    "NumericDegeneracyError",
    # Config
    "SETTINGS",
]
