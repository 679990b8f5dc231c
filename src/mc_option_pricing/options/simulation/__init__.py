"""
Monte Carlo simulation for option pricing.

Provides:
- Gaussian samplers (polar Box-Muller, direct Box-Muller, summation)
- Log-normal terminal value generation (direct and monthly averaged)
- Monte Carlo pricing engine
- Convergence analysis tools
"""

from mc_option_pricing.options.simulation.gaussian import (
    CosineSampler,
    GaussianSampler,
    PolarSampler,
    SamplingMethod,
    SummationSampler,
    make_sampler,
    validate_sampler,
)
from mc_option_pricing.options.simulation.gbm import (
    DirectTerminalGenerator,
    ModelParameters,
    MonthlyAveragedGenerator,
    PathGenerator,
    PathStrategy,
    make_path_generator,
    validate_gbm_simulation,
)
from mc_option_pricing.options.simulation.monte_carlo import (
    MonteCarloEngine,
    RunningStatistics,
    SimulationResult,
    convergence_analysis,
    price_vanilla_mc,
)

__all__ = [
    # Sampling
    "GaussianSampler",
    "SamplingMethod",
    "SummationSampler",
    "PolarSampler",
    "CosineSampler",
    "make_sampler",
    "validate_sampler",
    # Paths
    "ModelParameters",
    "PathStrategy",
    "PathGenerator",
    "DirectTerminalGenerator",
    "MonthlyAveragedGenerator",
    "make_path_generator",
    "validate_gbm_simulation",
    # Monte Carlo
    "MonteCarloEngine",
    "RunningStatistics",
    "SimulationResult",
    "convergence_analysis",
    "price_vanilla_mc",
]
