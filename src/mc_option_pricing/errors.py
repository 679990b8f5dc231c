"""
Exception hierarchy for Monte Carlo option pricing.

All failures are raised synchronously to the caller of the engine.
Nothing is retried and no partial result is ever returned.
"""


class PricingError(Exception):
    """Base class for all pricing failures."""

    pass


class InvalidArgumentError(PricingError, ValueError):
    """Raised when model, payoff or run inputs are out of range."""

    pass


class NumericDegeneracyError(PricingError, ArithmeticError):
    """Raised when sampling or aggregation cannot produce a finite value."""

    pass
