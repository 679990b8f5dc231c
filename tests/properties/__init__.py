"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_payoff_properties: Call/put payoff invariants (floor, parity, monotonicity)
    test_mc_properties: Monte Carlo engine invariants (bounds, reproducibility, parity)
"""
