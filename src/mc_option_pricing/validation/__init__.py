"""
Validation framework for simulation results.

Provides HALT/PASS gates for validating Monte Carlo outputs:
- FiniteResultGate: Price and standard error finite and non-negative
- ArbitrageBoundsGate: No-arbitrage checks
- RelativeErrorGate: Warn on noisy estimates
"""

from mc_option_pricing.validation.gates import (
    ArbitrageBoundsGate,
    FiniteResultGate,
    GateResult,
    GateStatus,
    RelativeErrorGate,
    ValidationEngine,
    ValidationGate,
    ValidationReport,
    validate_simulation_result,
)

__all__ = [
    # Enums and Results
    "GateStatus",
    "GateResult",
    "ValidationReport",
    # Base Gate
    "ValidationGate",
    # Specific Gates
    "FiniteResultGate",
    "ArbitrageBoundsGate",
    "RelativeErrorGate",
    # Engine
    "ValidationEngine",
    "validate_simulation_result",
]
