"""
Tests for the Monte Carlo pricing engine.

Tests correctness of:
- Running statistics and the expanded standard error formula
- Engine argument validation (number_of_paths < 2, payoff variant)
- Determinism for a fixed seed
- Discounting applied to the mean only
"""

import math

import numpy as np
import pytest

from mc_option_pricing.errors import InvalidArgumentError, NumericDegeneracyError
from mc_option_pricing.options.payoffs.base import CallPayoff, OptionType, PutPayoff
from mc_option_pricing.options.simulation.gaussian import make_sampler
from mc_option_pricing.options.simulation.gbm import ModelParameters, PathStrategy
from mc_option_pricing.options.simulation.monte_carlo import (
    MonteCarloEngine,
    RunningStatistics,
    SimulationResult,
    price_vanilla_mc,
)


def _accumulated(values) -> RunningStatistics:
    stats = RunningStatistics()
    for v in values:
        stats.accumulate(v)
    return stats


class TestRunningStatistics:
    """Tests for RunningStatistics."""

    def test_accumulate(self):
        stats = _accumulated([1.0, 2.0, 3.0])

        assert stats.count == 3
        assert stats.sum_payoff == 6.0
        assert stats.sum_squared_payoff == 14.0
        assert stats.mean == 2.0

    def test_standard_error_known_values(self):
        """Payoffs 1, 2, 3: sample variance 1, SE = sqrt(1/3)."""
        assert _accumulated([1.0, 2.0, 3.0]).standard_error == pytest.approx(math.sqrt(1 / 3))

    def test_expanded_formula_matches_two_pass(self, reproducible_rng, tolerances):
        values = reproducible_rng.exponential(5.0, size=1_000)
        stats = _accumulated(values)

        two_pass = values.std(ddof=1) / math.sqrt(len(values))

        assert stats.standard_error == pytest.approx(two_pass, rel=tolerances.standard_error_formula)

    def test_constant_payoffs_zero_error(self):
        """Cancellation in the expanded formula is clamped at zero."""
        stats = _accumulated([0.1] * 1_000)
        assert stats.standard_error == pytest.approx(0.0, abs=1e-6)

    def test_finalize_discounts_mean_only(self, model_params):
        stats = _accumulated([10.0, 20.0])
        result = stats.finalize(model_params)

        assert result.price == pytest.approx(15.0 * math.exp(-0.05))
        assert result.standard_error == pytest.approx(5.0)
        assert result.n_paths == 2
        assert result.discount_factor == pytest.approx(math.exp(-0.05))

    @pytest.mark.parametrize("values", [[], [1.0]])
    def test_finalize_requires_two_trials(self, values, model_params):
        with pytest.raises(InvalidArgumentError, match="at least 2 trials"):
            _accumulated(values).finalize(model_params)

    def test_finalize_non_finite(self, model_params):
        with pytest.raises(NumericDegeneracyError, match="non-finite"):
            _accumulated([1.0, float("inf")]).finalize(model_params)

    def test_mean_of_empty(self):
        with pytest.raises(InvalidArgumentError):
            RunningStatistics().mean

    def test_merge_equals_sequential(self, reproducible_rng, model_params):
        values = reproducible_rng.normal(3.0, 2.0, size=400)

        whole = _accumulated(values)
        merged = _accumulated(values[:150]).merge(_accumulated(values[150:]))

        assert merged.count == whole.count
        assert merged.sum_payoff == pytest.approx(whole.sum_payoff, rel=1e-12)
        assert merged.sum_squared_payoff == pytest.approx(whole.sum_squared_payoff, rel=1e-12)
        assert merged.finalize(model_params).price == pytest.approx(
            whole.finalize(model_params).price, rel=1e-12
        )


class TestSimulationResult:
    """Derived properties of SimulationResult."""

    def test_confidence_interval(self):
        result = SimulationResult(price=10.0, standard_error=0.5, n_paths=100, discount_factor=0.9)
        lower, upper = result.confidence_interval

        assert result.discounted_standard_error == pytest.approx(0.45)
        assert lower == pytest.approx(10.0 - 1.96 * 0.45)
        assert upper == pytest.approx(10.0 + 1.96 * 0.45)

    def test_relative_error_zero_price(self):
        result = SimulationResult(price=0.0, standard_error=0.0, n_paths=10)
        assert result.relative_error == float("inf")


class TestEngineValidation:
    """run() rejects bad inputs before sampling."""

    @pytest.mark.parametrize("n_paths", [0, 1, -5])
    def test_too_few_paths(self, n_paths, call_105, model_params):
        engine = MonteCarloEngine(seed=42)
        with pytest.raises(InvalidArgumentError, match="number_of_paths must be >= 2"):
            engine.run(call_105, model_params, n_paths)

    @pytest.mark.parametrize("n_paths", [10.5, "100", True])
    def test_non_integer_paths(self, n_paths, call_105, model_params):
        engine = MonteCarloEngine(seed=42)
        with pytest.raises(InvalidArgumentError, match="must be an integer"):
            engine.run(call_105, model_params, n_paths)

    def test_numpy_integer_paths(self, call_105, model_params):
        result = MonteCarloEngine(seed=42).run(call_105, model_params, np.int64(10))
        assert result.n_paths == 10

    def test_rejects_foreign_payoff(self, model_params):
        engine = MonteCarloEngine(seed=42)
        with pytest.raises(InvalidArgumentError, match="CallPayoff or PutPayoff"):
            engine.run(lambda s: max(s - 100.0, 0.0), model_params, 100)

    def test_no_sampling_on_invalid_paths(self, call_105, model_params):
        """The sampler stream is untouched when validation fails."""
        sampler = make_sampler("polar", seed=5)
        reference = make_sampler("polar", seed=5)
        engine = MonteCarloEngine(sampler=sampler)

        with pytest.raises(InvalidArgumentError):
            engine.run(call_105, model_params, 1)

        assert sampler.sample() == reference.sample()

    def test_monthly_short_expiry_fails(self, call_105):
        params = ModelParameters(spot=100.0, volatility=0.2, rate=0.05, expiry=0.05)
        engine = MonteCarloEngine(seed=42, strategy=PathStrategy.MONTHLY_AVERAGED)

        with pytest.raises(InvalidArgumentError):
            engine.run(call_105, params, 100)

    @pytest.mark.parametrize("strategy", list(PathStrategy))
    @pytest.mark.parametrize("vol, rate", [(1000.0, 0.05), (0.2, 800.0)])
    def test_overflow_is_numeric_degeneracy(self, strategy, vol, rate, call_105):
        """Terminal spots beyond float range surface as a pricing error."""
        params = ModelParameters(spot=100.0, volatility=vol, rate=rate, expiry=1.0)
        engine = MonteCarloEngine(seed=42, strategy=strategy)

        with pytest.raises(NumericDegeneracyError, match="overflowed"):
            engine.run(call_105, params, 100)


class TestEngineRun:
    """Behaviour of completed runs."""

    def test_deterministic_for_seed(self, call_105, model_params):
        a = MonteCarloEngine(seed=7).run(call_105, model_params, 5_000)
        b = MonteCarloEngine(seed=7).run(call_105, model_params, 5_000)

        assert a == b

    def test_stream_continues_across_runs(self, call_105, model_params):
        """Consecutive runs on one engine use successive draws."""
        engine = MonteCarloEngine(seed=7)
        first = engine.run(call_105, model_params, 2_000)
        second = engine.run(call_105, model_params, 2_000)

        assert first.price != second.price

    def test_matches_manual_loop(self, put_105, model_params):
        """Engine result equals a hand-written accumulation on the same stream."""
        engine = MonteCarloEngine(sampler=make_sampler("cosine", seed=99))
        result = engine.run(put_105, model_params, 1_000)

        sampler = make_sampler("cosine", seed=99)
        moved = 100.0 * math.exp(0.05 - 0.5 * 0.04)
        total = 0.0
        total_sq = 0.0
        for _ in range(1_000):
            payoff = max(105.0 - moved * math.exp(0.2 * sampler.sample()), 0.0)
            total += payoff
            total_sq += payoff * payoff
        mean = total / 1_000
        se = math.sqrt((total_sq + 1_000 * mean * mean - 2 * mean * total) / (1_000 * 999))

        assert result.price == pytest.approx(mean * math.exp(-0.05), rel=1e-12)
        assert result.standard_error == pytest.approx(se, rel=1e-12)

    def test_zero_volatility_is_deterministic(self, call_105):
        params = ModelParameters(spot=110.0, volatility=0.0, rate=0.05, expiry=1.0)
        result = MonteCarloEngine(seed=1).run(call_105, params, 100)

        expected = (110.0 * math.exp(0.05) - 105.0) * math.exp(-0.05)
        assert result.price == pytest.approx(expected, rel=1e-12)
        assert result.standard_error == pytest.approx(0.0, abs=1e-6)

    def test_default_path_count(self, call_105, model_params, monkeypatch):
        from mc_option_pricing.config.settings import Settings, SimulationConfig

        monkeypatch.setattr(
            "mc_option_pricing.options.simulation.monte_carlo.SETTINGS",
            Settings(simulation=SimulationConfig(n_paths=321, seed=3)),
        )

        result = MonteCarloEngine(seed=3).run(call_105, model_params)
        assert result.n_paths == 321


class TestPriceVanillaMC:
    """Tests for price_vanilla_mc convenience function."""

    def test_call_and_put(self):
        call = price_vanilla_mc(100, 105, 0.05, 0.2, 1.0, OptionType.CALL, n_paths=20_000, seed=42)
        put = price_vanilla_mc(100, 105, 0.05, 0.2, 1.0, "put", n_paths=20_000, seed=42)

        assert call.price > 0
        assert put.price > 0
        assert call.n_paths == put.n_paths == 20_000

    def test_invalid_strike(self):
        with pytest.raises(InvalidArgumentError, match="strike must be > 0"):
            price_vanilla_mc(100, 0, 0.05, 0.2, 1.0, n_paths=100)

    def test_invalid_spot(self):
        with pytest.raises(InvalidArgumentError, match="spot must be > 0"):
            price_vanilla_mc(-1, 100, 0.05, 0.2, 1.0, n_paths=100)
