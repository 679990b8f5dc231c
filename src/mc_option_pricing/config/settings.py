"""
Frozen configuration settings for Monte Carlo option pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Path count and seed can be overridden from the environment.
"""

import os
from dataclasses import dataclass

N_PATHS_ENV_VAR = "MC_PRICING_N_PATHS"
SEED_ENV_VAR = "MC_PRICING_SEED"


def _resolve_int_env(name: str, default: int) -> int:
    """
    Resolve an integer setting with environment variable override.

    Priority:
    1. Environment variable (if set and non-empty)
    2. Default value

    Raises
    ------
    ValueError
        If the environment variable is set but is not an integer
    """
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"CRITICAL: {name} must be an integer, got {raw!r}") from e


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable simulation configuration.

    Attributes
    ----------
    n_paths : int
        Default number of Monte Carlo paths. Override with MC_PRICING_N_PATHS.
    seed : int
        Default random seed. Override with MC_PRICING_SEED.
    sampling_method : str
        Default Gaussian sampler ("polar", "cosine" or "summation")
    path_strategy : str
        Default path generator ("direct_terminal" or "monthly_averaged")
    max_rejections : int
        Attempts allowed in the polar rejection loop before giving up
    months_per_year : int
        Observation frequency of the monthly averaged generator
    """

    n_paths: int = None  # type: ignore[assignment]  # Set in __post_init__
    seed: int = None  # type: ignore[assignment]  # Set in __post_init__
    sampling_method: str = "polar"
    path_strategy: str = "direct_terminal"
    max_rejections: int = 1_000
    months_per_year: int = 12

    def __post_init__(self) -> None:
        """Resolve environment overrides."""
        # Frozen dataclass workaround: use object.__setattr__
        if self.n_paths is None:
            object.__setattr__(self, "n_paths", _resolve_int_env(N_PATHS_ENV_VAR, 10_000))
        if self.seed is None:
            object.__setattr__(self, "seed", _resolve_int_env(SEED_ENV_VAR, 42))


# =============================================================================
# Validation Configuration
# =============================================================================

@dataclass(frozen=True)
class ValidationConfig:
    """
    Immutable result validation configuration.

    Attributes
    ----------
    halt_on_arbitrage : bool
        Whether to HALT on no-arbitrage bound violations
    halt_on_non_finite : bool
        Whether to HALT on NaN/inf price or standard error
    max_relative_error : float
        Relative standard error above which a WARN is raised
    """

    halt_on_arbitrage: bool = True
    halt_on_non_finite: bool = True
    max_relative_error: float = 0.05


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from mc_option_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.sampling_method
    'polar'
    """

    simulation: SimulationConfig = None  # type: ignore[assignment]
    validation: ValidationConfig = ValidationConfig()

    def __post_init__(self) -> None:
        if self.simulation is None:
            object.__setattr__(self, "simulation", SimulationConfig())


# Singleton instance - import this
SETTINGS = Settings()
