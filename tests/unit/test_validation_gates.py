"""
Tests for simulation result validation gates.
"""

import pytest

from mc_option_pricing.errors import PricingError
from mc_option_pricing.options.payoffs.base import CallPayoff, PutPayoff
from mc_option_pricing.options.simulation.monte_carlo import MonteCarloEngine, SimulationResult
from mc_option_pricing.validation.gates import (
    ArbitrageBoundsGate,
    FiniteResultGate,
    GateStatus,
    RelativeErrorGate,
    ValidationEngine,
    validate_simulation_result,
)


def _result(price: float, se: float = 0.01, n_paths: int = 10_000) -> SimulationResult:
    return SimulationResult(price=price, standard_error=se, n_paths=n_paths, discount_factor=1.0)


class TestFiniteResultGate:

    def test_pass(self, call_105, model_params):
        assert FiniteResultGate().check(_result(8.0), call_105, model_params).status == GateStatus.PASS

    @pytest.mark.parametrize("price", [float("nan"), float("inf")])
    def test_non_finite_halts(self, price, call_105, model_params):
        result = FiniteResultGate().check(_result(price), call_105, model_params)
        assert result.status == GateStatus.HALT
        assert "not finite" in result.message

    def test_negative_halts(self, call_105, model_params):
        result = FiniteResultGate().check(_result(-1.0), call_105, model_params)
        assert result.status == GateStatus.HALT

    def test_warn_only(self, call_105, model_params):
        result = FiniteResultGate(halt=False).check(_result(float("nan")), call_105, model_params)
        assert result.status == GateStatus.WARN


class TestArbitrageBoundsGate:

    def test_call_above_spot_halts(self, call_105, model_params):
        result = ArbitrageBoundsGate().check(_result(150.0), call_105, model_params)
        assert result.status == GateStatus.HALT
        assert result.threshold == model_params.spot

    def test_put_above_discounted_strike_halts(self, put_105, model_params):
        result = ArbitrageBoundsGate().check(_result(104.0), put_105, model_params)
        assert result.status == GateStatus.HALT
        assert result.threshold == pytest.approx(105.0 * model_params.discount_factor)

    def test_noise_allowance(self, call_105, model_params):
        """A price within 3 SE of the bound passes."""
        result = ArbitrageBoundsGate().check(_result(100.2, se=0.1), call_105, model_params)
        assert result.status == GateStatus.PASS

    def test_negative_price_halts(self, put_105, model_params):
        result = ArbitrageBoundsGate().check(_result(-1.0), put_105, model_params)
        assert result.status == GateStatus.HALT
        assert result.threshold == 0.0
        assert "below lower bound" in result.message

    def test_pass_message_names_both_bounds(self, call_105, model_params):
        result = ArbitrageBoundsGate().check(_result(8.0), call_105, model_params)
        assert result.status == GateStatus.PASS
        assert "within [0, 100.0000]" in result.message


class TestRelativeErrorGate:

    def test_noisy_result_warns(self, call_105, model_params):
        result = RelativeErrorGate(max_relative_error=0.01).check(
            _result(1.0, se=0.1), call_105, model_params
        )
        assert result.status == GateStatus.WARN
        assert result.passed

    def test_precise_result_passes(self, call_105, model_params):
        result = RelativeErrorGate().check(_result(8.0, se=0.04), call_105, model_params)
        assert result.status == GateStatus.PASS


class TestValidationEngine:

    def test_real_simulation_passes(self, call_105, model_params):
        mc = MonteCarloEngine(seed=42).run(call_105, model_params, 20_000)
        report = validate_simulation_result(mc, call_105, model_params)

        assert report.passed
        assert report.overall_status == GateStatus.PASS
        assert len(report.results) == 3

    def test_report_to_dict(self, call_105, model_params):
        report = ValidationEngine().validate(_result(150.0), call_105, model_params)
        as_dict = report.to_dict()

        assert as_dict["overall_status"] == "halt"
        assert as_dict["n_halted"] == 1
        assert {r["gate"] for r in as_dict["results"]} == {
            "finite_result", "arbitrage_bounds", "relative_error"
        }

    def test_validate_and_raise(self, call_105, model_params):
        with pytest.raises(PricingError, match="Validation failed"):
            ValidationEngine().validate_and_raise(_result(150.0), call_105, model_params)

    def test_validate_and_raise_returns_result(self, model_params):
        payoff = PutPayoff(100.0)
        ok = _result(5.0, se=0.05)
        assert ValidationEngine().validate_and_raise(ok, payoff, model_params) is ok

    def test_custom_gates(self, model_params):
        engine = ValidationEngine(gates=[FiniteResultGate()])
        report = engine.validate(_result(1.0), CallPayoff(100.0), model_params)
        assert len(report.results) == 1
