"""
Centralized tolerance framework for Monte Carlo option pricing.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, deterministic results
    Tier 2 (Sampling): Moments of the Gaussian samplers
    Tier 3 (Stochastic): CLT-derived, Monte Carlo price estimates

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 2-4 - Random numbers and Monte Carlo error bounds
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: No-arbitrage bounds: call in [0, S], put in [0, K*exp(-rT)]
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: Put-call parity on payoffs and on Black-Scholes prices
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-8

#: Agreement of the expanded standard error formula with a two-pass variance
STANDARD_ERROR_FORMULA_TOLERANCE: Final[float] = 1e-9


# =============================================================================
# Tier 2: Sampling Tolerances (Gaussian moments)
# =============================================================================
# For 1e5 draws the SE of the sample mean is ~0.003 and of the sample
# variance ~0.0045, so these bounds are >10 sigma wide.

#: |empirical mean| bound for 100k standard normal draws
GAUSSIAN_MEAN_TOLERANCE: Final[float] = 0.05

#: |empirical variance - 1| bound for 100k standard normal draws
GAUSSIAN_VARIANCE_TOLERANCE: Final[float] = 0.1


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_paths: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo paths
    sigma : float
        Estimated standard deviation of the payoff
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Tolerance for MC vs analytical comparison

    Examples
    --------
    >>> round(mc_tolerance(10_000), 3)
    0.006
    """
    return confidence * sigma / np.sqrt(n_paths)


#: Number of standard errors allowed between MC and Black-Scholes
BS_MC_CONFIDENCE_MULTIPLE: Final[float] = 4.0

#: Widening of arbitrage bounds in units of the MC standard error
ARBITRAGE_SE_MULTIPLE: Final[float] = 3.0


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1: Analytical
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "put_call_parity": PUT_CALL_PARITY_TOLERANCE,
    "standard_error_formula": STANDARD_ERROR_FORMULA_TOLERANCE,
    # Tier 2: Sampling
    "gaussian_mean": GAUSSIAN_MEAN_TOLERANCE,
    "gaussian_variance": GAUSSIAN_VARIANCE_TOLERANCE,
    # Tier 3: Stochastic
    "bs_mc_confidence_multiple": BS_MC_CONFIDENCE_MULTIPLE,
    "arbitrage_se_multiple": ARBITRAGE_SE_MULTIPLE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
