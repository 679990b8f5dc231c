"""
Analytical option pricing.

Provides Black-Scholes closed-form prices used as the reference for
Monte Carlo convergence checks.
"""

from mc_option_pricing.options.pricing.black_scholes import (
    black_scholes_call,
    black_scholes_price,
    black_scholes_put,
    put_call_parity_check,
)

__all__ = [
    "black_scholes_call",
    "black_scholes_put",
    "black_scholes_price",
    "put_call_parity_check",
]
