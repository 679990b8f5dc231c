"""
Validation Gates - HALT/PASS framework for simulation results.

Checks a SimulationResult for sanity before it is reported. Gates can
HALT (reject with diagnostics), WARN, or PASS.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from mc_option_pricing.config.settings import SETTINGS
from mc_option_pricing.config.tolerances import ANTI_PATTERN_TOLERANCE, ARBITRAGE_SE_MULTIPLE
from mc_option_pricing.errors import PricingError
from mc_option_pricing.options.payoffs.base import OptionType, Payoff
from mc_option_pricing.options.simulation.gbm import ModelParameters
from mc_option_pricing.options.simulation.monte_carlo import SimulationResult

logger = logging.getLogger(__name__)


class GateStatus(Enum):
    """Status of a validation gate."""
    PASS = "pass"
    HALT = "halt"
    WARN = "warn"


@dataclass(frozen=True)
class GateResult:
    """
    Result of a validation gate check.

    Attributes
    ----------
    status : GateStatus
        PASS, HALT, or WARN
    gate_name : str
        Name of the gate that was checked
    message : str
        Explanation of the result
    value : Any, optional
        The value that was checked
    threshold : Any, optional
        The threshold that was applied
    """

    status: GateStatus
    gate_name: str
    message: str
    value: Any | None = None
    threshold: Any | None = None

    @property
    def passed(self) -> bool:
        """Check if gate passed (PASS or WARN)."""
        return self.status != GateStatus.HALT


@dataclass(frozen=True)
class ValidationReport:
    """
    Complete validation report from all gates.

    Attributes
    ----------
    results : tuple[GateResult, ...]
        Results from all gates
    """

    results: tuple[GateResult, ...]

    @property
    def overall_status(self) -> GateStatus:
        """Get worst status across all gates."""
        if any(r.status == GateStatus.HALT for r in self.results):
            return GateStatus.HALT
        elif any(r.status == GateStatus.WARN for r in self.results):
            return GateStatus.WARN
        return GateStatus.PASS

    @property
    def passed(self) -> bool:
        """Check if all gates passed (no HALTs)."""
        return self.overall_status != GateStatus.HALT

    @property
    def halted_gates(self) -> list[GateResult]:
        return [r for r in self.results if r.status == GateStatus.HALT]

    @property
    def warned_gates(self) -> list[GateResult]:
        return [r for r in self.results if r.status == GateStatus.WARN]

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "overall_status": self.overall_status.value,
            "passed": self.passed,
            "n_halted": len(self.halted_gates),
            "n_warned": len(self.warned_gates),
            "results": [
                {
                    "gate": r.gate_name,
                    "status": r.status.value,
                    "message": r.message,
                    "value": r.value,
                    "threshold": r.threshold,
                }
                for r in self.results
            ],
        }


# =============================================================================
# Gate Implementations
# =============================================================================

class ValidationGate:
    """
    Base class for validation gates.

    Subclasses implement check() to validate simulation results.
    """

    name: str = "base_gate"

    def check(
        self,
        result: SimulationResult,
        payoff: Payoff,
        params: ModelParameters,
    ) -> GateResult:
        """
        Check the simulation result.

        Parameters
        ----------
        result : SimulationResult
            Result to validate
        payoff : CallPayoff or PutPayoff
            Payoff that was priced
        params : ModelParameters
            Model parameters of the run

        Returns
        -------
        GateResult
            Validation result
        """
        raise NotImplementedError


class FiniteResultGate(ValidationGate):
    """
    Check that price and standard error are finite and non-negative.

    [T1] Both are means/roots of non-negative quantities.
    """

    name = "finite_result"

    def __init__(self, halt: bool | None = None):
        if halt is None:
            halt = SETTINGS.validation.halt_on_non_finite
        self.halt = halt

    def check(self, result, payoff, params) -> GateResult:
        fail_status = GateStatus.HALT if self.halt else GateStatus.WARN

        for label, value in (("price", result.price), ("standard_error", result.standard_error)):
            if not math.isfinite(value):
                return GateResult(
                    status=fail_status,
                    gate_name=self.name,
                    message=f"{label} is not finite: {value}",
                    value=value,
                )
            if value < -ANTI_PATTERN_TOLERANCE:
                return GateResult(
                    status=fail_status,
                    gate_name=self.name,
                    message=f"{label} {value:.6f} is negative",
                    value=value,
                    threshold=0.0,
                )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message="Price and standard error finite",
        )


class ArbitrageBoundsGate(ValidationGate):
    """
    Check no-arbitrage bounds, widened by the simulation noise.

    [T1] Call: 0 <= C <= S
    [T1] Put:  0 <= P <= K*e^(-rT)
    """

    name = "arbitrage_bounds"

    def __init__(
        self,
        se_multiple: float = ARBITRAGE_SE_MULTIPLE,
        halt: bool | None = None,
    ):
        if halt is None:
            halt = SETTINGS.validation.halt_on_arbitrage
        self.se_multiple = se_multiple
        self.halt = halt

    def check(self, result, payoff, params) -> GateResult:
        if payoff.option_type == OptionType.CALL:
            upper = params.spot
        else:
            upper = payoff.strike * params.discount_factor

        slack = self.se_multiple * result.discounted_standard_error + ANTI_PATTERN_TOLERANCE

        if result.price < -slack:
            return GateResult(
                status=GateStatus.HALT if self.halt else GateStatus.WARN,
                gate_name=self.name,
                message=f"{payoff.option_type.value} price {result.price:.4f} "
                        f"below lower bound 0",
                value=result.price,
                threshold=0.0,
            )

        if result.price > upper + slack:
            return GateResult(
                status=GateStatus.HALT if self.halt else GateStatus.WARN,
                gate_name=self.name,
                message=f"{payoff.option_type.value} price {result.price:.4f} "
                        f"exceeds upper bound {upper:.4f}",
                value=result.price,
                threshold=upper,
            )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message=f"Price {result.price:.4f} within [0, {upper:.4f}]",
            value=result.price,
            threshold=upper,
        )


class RelativeErrorGate(ValidationGate):
    """
    Warn when the estimate is too noisy to be useful.

    Never HALTs: more paths is the remedy, not rejection.
    """

    name = "relative_error"

    def __init__(self, max_relative_error: float | None = None):
        if max_relative_error is None:
            max_relative_error = SETTINGS.validation.max_relative_error
        self.max_relative_error = max_relative_error

    def check(self, result, payoff, params) -> GateResult:
        rel = result.relative_error

        if rel > self.max_relative_error:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message=f"Relative standard error {rel:.2%} exceeds "
                        f"{self.max_relative_error:.2%} with {result.n_paths} paths",
                value=rel,
                threshold=self.max_relative_error,
            )

        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message=f"Relative standard error {rel:.2%}",
            value=rel,
        )


class ValidationEngine:
    """
    Engine for running validation gates on simulation results.

    Parameters
    ----------
    gates : list[ValidationGate], optional
        Custom gates to use. If None, uses default gates.

    Examples
    --------
    >>> engine = ValidationEngine()
    >>> report = engine.validate(result, payoff, params)
    >>> if not report.passed:
    ...     for gate in report.halted_gates:
    ...         print(f"HALT: {gate.message}")
    """

    def __init__(
        self,
        gates: list[ValidationGate] | None = None,
    ):
        if gates is None:
            gates = self._default_gates()
        self.gates = gates

    def _default_gates(self) -> list[ValidationGate]:
        """Create default set of validation gates."""
        return [
            FiniteResultGate(),
            ArbitrageBoundsGate(),
            RelativeErrorGate(),
        ]

    def validate(
        self,
        result: SimulationResult,
        payoff: Payoff,
        params: ModelParameters,
    ) -> ValidationReport:
        """Run all validation gates on a simulation result."""
        results = []
        for gate in self.gates:
            gate_result = gate.check(result, payoff, params)
            if gate_result.status != GateStatus.PASS:
                logger.warning(f"{gate_result.status.value.upper()} {gate.name}: {gate_result.message}")
            results.append(gate_result)

        return ValidationReport(results=tuple(results))

    def validate_and_raise(
        self,
        result: SimulationResult,
        payoff: Payoff,
        params: ModelParameters,
    ) -> SimulationResult:
        """
        Validate and raise exception on HALT.

        Returns
        -------
        SimulationResult
            The same result if validation passes

        Raises
        ------
        PricingError
            If any gate HALTs
        """
        report = self.validate(result, payoff, params)

        if not report.passed:
            halt_messages = [g.message for g in report.halted_gates]
            raise PricingError(
                "CRITICAL: Validation failed. HALTs:\n" +
                "\n".join(f"  - {m}" for m in halt_messages)
            )

        return result


def validate_simulation_result(
    result: SimulationResult,
    payoff: Payoff,
    params: ModelParameters,
) -> ValidationReport:
    """Quick validation of a simulation result with the default gates."""
    return ValidationEngine().validate(result, payoff, params)
