"""
Monte Carlo option pricing engine.

Runs N independent trials: terminal value from a path generator, payoff
on that value, running sum and sum of squares of the undiscounted payoff.
The discounted mean is the price; the expanded sample-variance formula
gives the standard error.

[T1] MC converges to the analytical price at rate 1/√N

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from mc_option_pricing.config.settings import SETTINGS
from mc_option_pricing.errors import InvalidArgumentError, NumericDegeneracyError
from mc_option_pricing.options.payoffs.base import (
    CallPayoff,
    OptionType,
    Payoff,
    PutPayoff,
    make_payoff,
)
from mc_option_pricing.options.simulation.gaussian import (
    GaussianSampler,
    SamplingMethod,
    make_sampler,
)
from mc_option_pricing.options.simulation.gbm import (
    ModelParameters,
    PathStrategy,
    make_path_generator,
    resolve_path_strategy,
)

logger = logging.getLogger(__name__)

#: z-score of the two-sided 95% confidence interval
CI_Z_SCORE = 1.96


@dataclass(frozen=True)
class SimulationResult:
    """
    Monte Carlo pricing result.

    Attributes
    ----------
    price : float
        Option price (discounted mean payoff)
    standard_error : float
        Standard error of the undiscounted mean payoff
    n_paths : int
        Number of paths used
    discount_factor : float
        Discount factor applied to the mean
    """

    price: float
    standard_error: float
    n_paths: int
    discount_factor: float = 1.0

    @property
    def discounted_standard_error(self) -> float:
        """Standard error on the price scale."""
        return self.standard_error * self.discount_factor

    @property
    def confidence_interval(self) -> tuple[float, float]:
        """95% confidence interval for the price."""
        half_width = CI_Z_SCORE * self.discounted_standard_error
        return (self.price - half_width, self.price + half_width)

    @property
    def relative_error(self) -> float:
        """Relative standard error (discounted SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.discounted_standard_error / abs(self.price)


@dataclass
class RunningStatistics:
    """
    Running sums over the undiscounted payoffs of one run.

    Attributes
    ----------
    count : int
        Number of completed trials
    sum_payoff : float
        Sum of payoffs
    sum_squared_payoff : float
        Sum of squared payoffs
    """

    count: int = 0
    sum_payoff: float = 0.0
    sum_squared_payoff: float = 0.0

    def accumulate(self, payoff: float) -> None:
        """Add one trial's payoff."""
        self.sum_payoff += payoff
        self.sum_squared_payoff += payoff * payoff
        self.count += 1

    def merge(self, other: "RunningStatistics") -> "RunningStatistics":
        """
        Combine partial statistics from independent streams.

        Sums are additive, so finalize() on the merged object applies the
        same formula as a single sequential run.
        """
        return RunningStatistics(
            count=self.count + other.count,
            sum_payoff=self.sum_payoff + other.sum_payoff,
            sum_squared_payoff=self.sum_squared_payoff + other.sum_squared_payoff,
        )

    @property
    def mean(self) -> float:
        """Undiscounted sample mean payoff."""
        if self.count == 0:
            raise InvalidArgumentError("CRITICAL: mean requires at least one trial")
        return self.sum_payoff / self.count

    @property
    def standard_error(self) -> float:
        """
        Standard error of the mean payoff.

        [T1] SE = sqrt((Σx² + N·m² - 2·m·Σx) / (N·(N-1))), m = Σx / N

        Floating point cancellation can leave the numerator a hair below
        zero for constant payoffs; it is clamped at 0.
        """
        n = self.count
        if n < 2:
            raise InvalidArgumentError(
                f"CRITICAL: standard error requires at least 2 trials, got {n}"
            )
        mean = self.sum_payoff / n
        numerator = self.sum_squared_payoff + n * mean * mean - 2 * mean * self.sum_payoff
        return math.sqrt(max(numerator, 0.0) / (n * (n - 1)))

    def finalize(self, params: ModelParameters) -> SimulationResult:
        """
        Turn the running sums into a price and standard error.

        Parameters
        ----------
        params : ModelParameters
            Model parameters (rate and expiry for discounting)

        Returns
        -------
        SimulationResult
            Discounted price and standard error

        Raises
        ------
        InvalidArgumentError
            If fewer than 2 trials were accumulated
        NumericDegeneracyError
            If the sums are not finite
        """
        if self.count < 2:
            raise InvalidArgumentError(
                f"CRITICAL: finalize requires at least 2 trials, got {self.count}"
            )
        if not (math.isfinite(self.sum_payoff) and math.isfinite(self.sum_squared_payoff)):
            raise NumericDegeneracyError(
                f"CRITICAL: non-finite payoff sums after {self.count} trials "
                f"(sum={self.sum_payoff}, sum_sq={self.sum_squared_payoff})"
            )

        discount_factor = math.exp(-params.rate * params.expiry)
        standard_error = self.standard_error
        price = self.mean * discount_factor

        if not (math.isfinite(price) and math.isfinite(standard_error)):
            raise NumericDegeneracyError(
                f"CRITICAL: non-finite result (price={price}, standard_error={standard_error})"
            )

        return SimulationResult(
            price=price,
            standard_error=standard_error,
            n_paths=self.count,
            discount_factor=discount_factor,
        )


def _validate_number_of_paths(number_of_paths: int) -> None:
    if isinstance(number_of_paths, bool) or not isinstance(number_of_paths, (int, np.integer)):
        raise InvalidArgumentError(
            f"CRITICAL: number_of_paths must be an integer, got {number_of_paths!r}"
        )
    if number_of_paths < 2:
        raise InvalidArgumentError(
            f"CRITICAL: number_of_paths must be >= 2, got {number_of_paths}"
        )


class MonteCarloEngine:
    """
    Sequential Monte Carlo pricing engine.

    Parameters
    ----------
    sampler : GaussianSampler, optional
        Source of normal draws. If None, one is built from method and seed.
    strategy : PathStrategy or str, optional
        Path generation strategy (default from settings: direct terminal)
    method : SamplingMethod or str, optional
        Sampling method when no sampler is given (default: polar)
    seed : int, optional
        Seed when no sampler is given (default from settings)

    Examples
    --------
    >>> engine = MonteCarloEngine(seed=42)
    >>> params = ModelParameters(spot=100, volatility=0.2, rate=0.05, expiry=1.0)
    >>> result = engine.run(CallPayoff(105), params, 100_000)
    >>> print(f"Price: {result.price:.4f} ± {result.standard_error:.4f}")
    """

    def __init__(
        self,
        sampler: Optional[GaussianSampler] = None,
        strategy: PathStrategy | str | None = None,
        method: SamplingMethod | str | None = None,
        seed: Optional[int] = None,
    ):
        if sampler is None:
            if seed is None:
                seed = SETTINGS.simulation.seed
            sampler = make_sampler(method, seed=seed)
        if strategy is None:
            strategy = SETTINGS.simulation.path_strategy

        self.sampler = sampler
        self.strategy = resolve_path_strategy(strategy)

    def run(
        self,
        payoff: Payoff,
        params: ModelParameters,
        number_of_paths: Optional[int] = None,
    ) -> SimulationResult:
        """
        Price an option by simulation.

        Parameters
        ----------
        payoff : CallPayoff or PutPayoff
            Payoff evaluated on each terminal value
        params : ModelParameters
            Model parameters
        number_of_paths : int, optional
            Number of trials, >= 2 (default from settings)

        Returns
        -------
        SimulationResult
            Discounted price and standard error

        Raises
        ------
        InvalidArgumentError
            If number_of_paths < 2 or payoff is not a supported variant
        NumericDegeneracyError
            If sampling or aggregation degenerates
        """
        if number_of_paths is None:
            number_of_paths = SETTINGS.simulation.n_paths
        _validate_number_of_paths(number_of_paths)
        if not isinstance(payoff, (CallPayoff, PutPayoff)):
            raise InvalidArgumentError(
                f"CRITICAL: payoff must be CallPayoff or PutPayoff, got {type(payoff).__name__}"
            )

        statistics = RunningStatistics()

        logger.debug(
            f"Running {number_of_paths} paths: {self.strategy.value} / "
            f"{self.sampler.method.value}, {payoff}"
        )
        start_time = time.time()

        try:
            generator = make_path_generator(self.strategy, params)
            for _ in range(int(number_of_paths)):
                this_spot = generator.generate_terminal(self.sampler)
                statistics.accumulate(payoff.evaluate(this_spot))
        except OverflowError as e:
            logger.warning(
                f"Overflow after {statistics.count} paths: vol={params.volatility}, "
                f"rate={params.rate}, expiry={params.expiry}"
            )
            raise NumericDegeneracyError(
                f"CRITICAL: terminal spot overflowed after {statistics.count} paths "
                f"(volatility={params.volatility}, rate={params.rate}, expiry={params.expiry})"
            ) from e

        result = statistics.finalize(params)

        logger.debug(
            f"Completed {number_of_paths} paths in {time.time() - start_time:.2f}s: "
            f"price={result.price:.6f}, standard_error={result.standard_error:.6f}"
        )
        return result


def price_vanilla_mc(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    expiry: float,
    option_type: OptionType | str = OptionType.CALL,
    n_paths: Optional[int] = None,
    seed: Optional[int] = None,
    method: SamplingMethod | str | None = None,
    strategy: PathStrategy | str | None = None,
) -> SimulationResult:
    """
    Convenience function to price a vanilla option via MC.

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    volatility : float
        Volatility (decimal)
    expiry : float
        Time to expiry in years
    option_type : OptionType or str, default CALL
        CALL or PUT
    n_paths : int, optional
        Number of paths (default from settings)
    seed : int, optional
        Random seed (default from settings)
    method : SamplingMethod or str, optional
        Gaussian sampler (default polar)
    strategy : PathStrategy or str, optional
        Path generator (default direct terminal)

    Returns
    -------
    SimulationResult
        Monte Carlo pricing result

    Examples
    --------
    >>> result = price_vanilla_mc(100, 105, 0.05, 0.20, 1.0, n_paths=100_000)
    >>> round(result.price)
    8
    """
    params = ModelParameters(spot=spot, volatility=volatility, rate=rate, expiry=expiry)
    payoff = make_payoff(strike, option_type)
    engine = MonteCarloEngine(strategy=strategy, method=method, seed=seed)
    return engine.run(payoff, params, n_paths)


def convergence_analysis(
    params: ModelParameters,
    payoff: Payoff,
    analytical_price: float,
    path_counts: tuple[int, ...] = (1_000, 5_000, 10_000, 50_000, 100_000),
    seed: int = 42,
    method: SamplingMethod | str | None = None,
) -> pd.DataFrame:
    """
    Analyze MC convergence to an analytical price.

    [T1] MC standard error should shrink at rate 1/√N.

    Each path count is run with a freshly seeded sampler and the direct
    terminal generator.

    Parameters
    ----------
    params : ModelParameters
        Model parameters
    payoff : CallPayoff or PutPayoff
        Payoff to price
    analytical_price : float
        Reference (Black-Scholes) price
    path_counts : tuple[int, ...]
        Number of paths to test
    seed : int
        Random seed
    method : SamplingMethod or str, optional
        Gaussian sampler

    Returns
    -------
    pd.DataFrame
        One row per path count; attrs["convergence_rate"] holds the fitted
        log-log slope of standard error vs N (theory: -0.5)
    """
    rows = []

    for n in path_counts:
        engine = MonteCarloEngine(
            sampler=make_sampler(method, seed=seed),
            strategy=PathStrategy.DIRECT_TERMINAL,
        )
        mc_result = engine.run(payoff, params, n)

        lower, upper = mc_result.confidence_interval
        rows.append(
            {
                "n_paths": n,
                "mc_price": mc_result.price,
                "analytical_price": analytical_price,
                "absolute_error": abs(mc_result.price - analytical_price),
                "standard_error": mc_result.standard_error,
                "within_ci": lower <= analytical_price <= upper,
            }
        )
        logger.info(
            f"  n={n}: price={mc_result.price:.4f} ± {mc_result.standard_error:.4f}"
        )

    df = pd.DataFrame(rows)
    df.attrs["convergence_rate"] = _estimate_convergence_rate(df)
    return df


def _estimate_convergence_rate(df: pd.DataFrame) -> float:
    """
    Estimate convergence rate from results.

    [T1] Theory predicts rate = -0.5 (SE ~ 1/√N).

    Returns
    -------
    float
        Fitted slope of log(SE) against log(N), NaN with fewer than 2 rows
    """
    if len(df) < 2:
        return float("nan")

    log_n = np.log(df["n_paths"].to_numpy(dtype=float))
    log_se = np.log(df["standard_error"].to_numpy(dtype=float) + 1e-300)
    slope, _ = np.polyfit(log_n, log_se, 1)
    return float(slope)
