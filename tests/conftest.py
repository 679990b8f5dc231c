"""
Centralized pytest fixtures for mc-option-pricing test suite.

Fixture Categories:
1. Tolerances - Tiered tolerance settings
2. Model Parameters - Standard market conditions for option pricing
3. Reference Scenario - Call K=105, S=100, σ=0.2, r=0.05, T=1
4. Samplers - Freshly seeded Gaussian samplers
"""

from dataclasses import dataclass

import numpy as np
import pytest

from mc_option_pricing.config.tolerances import (
    ANTI_PATTERN_TOLERANCE,
    BS_MC_CONFIDENCE_MULTIPLE,
    GAUSSIAN_MEAN_TOLERANCE,
    GAUSSIAN_VARIANCE_TOLERANCE,
    STANDARD_ERROR_FORMULA_TOLERANCE,
)
from mc_option_pricing.options.payoffs.base import CallPayoff, PutPayoff
from mc_option_pricing.options.simulation.gaussian import make_sampler
from mc_option_pricing.options.simulation.gbm import ModelParameters

# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    See: mc_option_pricing/config/tolerances.py
    """

    # Deterministic identities (parity, formula algebra)
    anti_pattern: float = ANTI_PATTERN_TOLERANCE
    standard_error_formula: float = STANDARD_ERROR_FORMULA_TOLERANCE

    # Gaussian moments over 1e5 draws
    gaussian_mean: float = GAUSSIAN_MEAN_TOLERANCE
    gaussian_variance: float = GAUSSIAN_VARIANCE_TOLERANCE

    # Monte Carlo vs analytical, in standard errors
    mc_se_multiple: float = BS_MC_CONFIDENCE_MULTIPLE


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# MODEL PARAMETERS
# =============================================================================

@pytest.fixture
def model_params() -> ModelParameters:
    """Reference scenario: S=100, σ=0.2, r=0.05, T=1."""
    return ModelParameters(spot=100.0, volatility=0.20, rate=0.05, expiry=1.0)


@pytest.fixture
def call_105() -> CallPayoff:
    """Out-of-the-money call used by the reference scenario."""
    return CallPayoff(strike=105.0)


@pytest.fixture
def put_105() -> PutPayoff:
    """In-the-money put on the reference scenario."""
    return PutPayoff(strike=105.0)


# =============================================================================
# SAMPLERS
# =============================================================================

@pytest.fixture
def polar_sampler():
    """Polar Box-Muller sampler seeded with 42."""
    return make_sampler("polar", seed=42)


@pytest.fixture
def reproducible_rng():
    """Provide a reproducible numpy random generator."""
    return np.random.default_rng(seed=42)
