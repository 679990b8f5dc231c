"""
Geometric Brownian Motion (GBM) terminal value generation.

Implements the two path strategies used by the Monte Carlo engine:
- Direct terminal: one exact log-normal draw over the full horizon
- Monthly averaged: arithmetic average of monthly log-normal spots

[T1] GBM SDE: dS = rS dt + σS dW
[T1] Exact terminal law: S(T) = S(0) * exp((r - σ²/2)T + σ√T * Z)

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from mc_option_pricing.config.settings import SETTINGS
from mc_option_pricing.errors import InvalidArgumentError
from mc_option_pricing.options.simulation.gaussian import GaussianSampler

#: Slack when counting monthly steps, so 12 * (1/3) counts as 4 months
_MONTH_COUNT_EPSILON = 1e-9


@dataclass(frozen=True)
class ModelParameters:
    """
    Parameters of the log-normal asset model.

    Attributes
    ----------
    spot : float
        Initial spot price (> 0)
    volatility : float
        Volatility (annualized, decimal, >= 0)
    rate : float
        Risk-free rate (annualized, decimal, any sign)
    expiry : float
        Time to expiry in years (> 0)
    """

    spot: float
    volatility: float
    rate: float
    expiry: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        if not self.spot > 0:
            raise InvalidArgumentError(f"CRITICAL: spot must be > 0, got {self.spot}")
        if not self.volatility >= 0:
            raise InvalidArgumentError(
                f"CRITICAL: volatility must be >= 0, got {self.volatility}"
            )
        if not math.isfinite(self.rate):
            raise InvalidArgumentError(f"CRITICAL: rate must be finite, got {self.rate}")
        if not self.expiry > 0:
            raise InvalidArgumentError(f"CRITICAL: expiry must be > 0, got {self.expiry}")

    @property
    def variance(self) -> float:
        """Total log variance over the horizon: σ²T."""
        return self.volatility * self.volatility * self.expiry

    @property
    def forward(self) -> float:
        """Forward price: S * exp(rT)."""
        return self.spot * math.exp(self.rate * self.expiry)

    @property
    def discount_factor(self) -> float:
        """Discount factor: exp(-rT)."""
        return math.exp(-self.rate * self.expiry)


class PathStrategy(Enum):
    """Terminal value generation strategy."""

    DIRECT_TERMINAL = "direct_terminal"
    MONTHLY_AVERAGED = "monthly_averaged"


def _moved_spot(spot: float, volatility: float, rate: float, horizon: float) -> tuple[float, float]:
    """
    Drift-adjusted spot and root variance for a horizon.

    [T1] moved = S * exp(r*t - σ²t/2), root_variance = σ√t

    Returns
    -------
    tuple[float, float]
        (moved_spot, root_variance)
    """
    variance = volatility * volatility * horizon
    root_variance = math.sqrt(variance)
    ito_correction = -0.5 * variance
    moved_spot = spot * math.exp(rate * horizon + ito_correction)
    return moved_spot, root_variance


class PathGenerator(ABC):
    """
    Strategy producing one simulated terminal spot per call.

    Holds only its model parameters and precomputed constants; all
    randomness comes from the sampler passed to generate_terminal().
    """

    strategy: PathStrategy

    def __init__(self, params: ModelParameters):
        self.params = params

    @abstractmethod
    def generate_terminal(self, sampler: GaussianSampler) -> float:
        """
        Generate one terminal spot sample.

        Parameters
        ----------
        sampler : GaussianSampler
            Source of standard normal draws

        Returns
        -------
        float
            Simulated terminal (or averaged) spot
        """
        pass


class DirectTerminalGenerator(PathGenerator):
    """
    One-shot draw from the terminal log-normal distribution.

    [T1] S(T) = S(0) * exp(rT - σ²T/2) * exp(σ√T * Z)

    No intermediate steps are needed because the terminal marginal is
    known in closed form.
    """

    strategy = PathStrategy.DIRECT_TERMINAL

    def __init__(self, params: ModelParameters):
        super().__init__(params)
        self.moved_spot, self.root_variance = _moved_spot(
            params.spot, params.volatility, params.rate, params.expiry
        )

    def generate_terminal(self, sampler: GaussianSampler) -> float:
        return self.moved_spot * math.exp(self.root_variance * sampler.sample())


class MonthlyAveragedGenerator(PathGenerator):
    """
    Arithmetic average of monthly log-normal spots.

    For j = 1..n_months with t = j/12, each monthly spot is
    S(0) * exp(rt - σ²t/2) * exp(σ√t * Z_j) with a fresh Z_j. The Z_j are
    independent across months, so monthly spots are drawn from their
    correct marginals but are not serially correlated as on a single
    Brownian path.

    n_months counts the j >= 1 with j <= 12 * expiry and is also the
    divisor of the average.

    Parameters
    ----------
    params : ModelParameters
        Model parameters
    months_per_year : int, optional
        Observation frequency (default from settings, 12)

    Raises
    ------
    InvalidArgumentError
        If expiry is shorter than one observation period
    """

    strategy = PathStrategy.MONTHLY_AVERAGED

    def __init__(self, params: ModelParameters, months_per_year: Optional[int] = None):
        super().__init__(params)
        if months_per_year is None:
            months_per_year = SETTINGS.simulation.months_per_year
        if months_per_year <= 0:
            raise InvalidArgumentError(
                f"CRITICAL: months_per_year must be > 0, got {months_per_year}"
            )

        self.months_per_year = months_per_year
        self.n_months = int(math.floor(months_per_year * params.expiry + _MONTH_COUNT_EPSILON))
        if self.n_months < 1:
            raise InvalidArgumentError(
                f"CRITICAL: expiry {params.expiry} is shorter than one observation "
                f"period (1/{months_per_year} year)"
            )

        self.observation_times = tuple(
            float(j) / months_per_year for j in range(1, self.n_months + 1)
        )
        steps = [
            _moved_spot(params.spot, params.volatility, params.rate, t)
            for t in self.observation_times
        ]
        self.moved_spots = tuple(s[0] for s in steps)
        self.root_variances = tuple(s[1] for s in steps)

    def generate_terminal(self, sampler: GaussianSampler) -> float:
        running_spot = 0.0
        for moved_spot, root_variance in zip(self.moved_spots, self.root_variances):
            running_spot += moved_spot * math.exp(root_variance * sampler.sample())
        return running_spot / self.n_months


_GENERATORS: dict[PathStrategy, type[PathGenerator]] = {
    PathStrategy.DIRECT_TERMINAL: DirectTerminalGenerator,
    PathStrategy.MONTHLY_AVERAGED: MonthlyAveragedGenerator,
}


def resolve_path_strategy(strategy: PathStrategy | str) -> PathStrategy:
    """Convert a strategy name to PathStrategy."""
    if isinstance(strategy, PathStrategy):
        return strategy
    try:
        return PathStrategy(str(strategy).lower())
    except ValueError as e:
        available = ", ".join(s.value for s in PathStrategy)
        raise InvalidArgumentError(
            f"CRITICAL: unknown path strategy {strategy!r}. Available: {available}"
        ) from e


def make_path_generator(
    strategy: PathStrategy | str | None,
    params: ModelParameters,
) -> PathGenerator:
    """
    Create a path generator.

    Parameters
    ----------
    strategy : PathStrategy or str, optional
        Strategy; defaults to SETTINGS.simulation.path_strategy
    params : ModelParameters
        Model parameters

    Returns
    -------
    PathGenerator
        Generator instance
    """
    if strategy is None:
        strategy = SETTINGS.simulation.path_strategy
    return _GENERATORS[resolve_path_strategy(strategy)](params)


def validate_gbm_simulation(
    params: ModelParameters,
    sampler: GaussianSampler,
    n_paths: int = 100_000,
) -> dict:
    """
    Validate direct terminal simulation against theoretical moments.

    [T1] Under risk-neutral measure:
    - E[S(T)] = S(0) * exp(rT) (forward price)
    - Var[log(S(T)/S(0))] = σ²T

    Parameters
    ----------
    params : ModelParameters
        Model parameters
    sampler : GaussianSampler
        Sampler to drive the generator (its stream is consumed)
    n_paths : int, default 100000
        Number of terminal values

    Returns
    -------
    dict
        Validation results with theoretical vs simulated values
    """
    if n_paths < 2:
        raise InvalidArgumentError(f"CRITICAL: n_paths must be >= 2, got {n_paths}")

    generator = DirectTerminalGenerator(params)
    terminal = np.fromiter(
        (generator.generate_terminal(sampler) for _ in range(n_paths)),
        dtype=float,
        count=n_paths,
    )

    expected_mean = params.forward
    expected_log_var = params.variance

    simulated_mean = float(terminal.mean())
    simulated_log_var = float(np.log(terminal / params.spot).var(ddof=1))
    se_mean = float(terminal.std(ddof=1) / np.sqrt(n_paths))

    return {
        "n_paths": n_paths,
        "theoretical_mean": expected_mean,
        "simulated_mean": simulated_mean,
        "mean_error": abs(simulated_mean - expected_mean),
        "mean_se": se_mean,
        "mean_z_score": (simulated_mean - expected_mean) / se_mean if se_mean > 0 else 0.0,
        "theoretical_log_variance": expected_log_var,
        "simulated_log_variance": simulated_log_var,
        "validation_passed": abs(simulated_mean - expected_mean) / expected_mean < 0.01,
    }
