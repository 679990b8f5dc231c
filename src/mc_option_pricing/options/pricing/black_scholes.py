"""
Black-Scholes closed-form pricing for European options.

Serves as the analytical oracle for the Monte Carlo engine.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

import numpy as np
from scipy import stats

from mc_option_pricing.config.tolerances import PUT_CALL_PARITY_TOLERANCE
from mc_option_pricing.errors import InvalidArgumentError
from mc_option_pricing.options.payoffs.base import OptionType


def _calculate_d1_d2(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> tuple[float, float]:
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r - q + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T
    """
    sqrt_t = np.sqrt(time_to_expiry)
    vol_sqrt_t = volatility * sqrt_t

    d1 = (
        np.log(spot / strike) + (rate - dividend + 0.5 * volatility**2) * time_to_expiry
    ) / vol_sqrt_t

    d2 = d1 - vol_sqrt_t

    return d1, d2


def _forward_intrinsic(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    time_to_expiry: float,
) -> float:
    """Discounted forward minus discounted strike: S*e^(-qT) - K*e^(-rT)."""
    return float(
        spot * np.exp(-dividend * time_to_expiry) - strike * np.exp(-rate * time_to_expiry)
    )


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    Price European call option using Black-Scholes.

    [T1] C = S*e^(-qT)*N(d1) - K*e^(-rT)*N(d2)

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    dividend : float
        Dividend yield (decimal)
    volatility : float
        Volatility (decimal)
    time_to_expiry : float
        Time to expiry (years)

    Returns
    -------
    float
        Call option price

    Examples
    --------
    >>> price = black_scholes_call(100, 105, 0.05, 0.0, 0.20, 1.0)
    >>> round(price, 2)
    8.02
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    # Zero variance: payoff is deterministic
    if time_to_expiry == 0 or volatility == 0:
        return max(_forward_intrinsic(spot, strike, rate, dividend, time_to_expiry), 0.0)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)

    call_price = (
        spot * np.exp(-dividend * time_to_expiry) * stats.norm.cdf(d1)
        - strike * np.exp(-rate * time_to_expiry) * stats.norm.cdf(d2)
    )

    return float(call_price)


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    Price European put option using Black-Scholes.

    [T1] P = K*e^(-rT)*N(-d2) - S*e^(-qT)*N(-d1)

    Examples
    --------
    >>> price = black_scholes_put(100, 105, 0.05, 0.0, 0.20, 1.0)
    >>> round(price, 2)
    7.9
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    if time_to_expiry == 0 or volatility == 0:
        return max(-_forward_intrinsic(spot, strike, rate, dividend, time_to_expiry), 0.0)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)

    put_price = (
        strike * np.exp(-rate * time_to_expiry) * stats.norm.cdf(-d2)
        - spot * np.exp(-dividend * time_to_expiry) * stats.norm.cdf(-d1)
    )

    return float(put_price)


def black_scholes_price(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Price European option using Black-Scholes.

    Parameters
    ----------
    spot : float
        Current spot price
    strike : float
        Strike price
    rate : float
        Risk-free rate (decimal)
    dividend : float
        Dividend yield (decimal)
    volatility : float
        Volatility (decimal)
    time_to_expiry : float
        Time to expiry (years)
    option_type : OptionType
        CALL or PUT

    Returns
    -------
    float
        Option price
    """
    if option_type == OptionType.CALL:
        return black_scholes_call(spot, strike, rate, dividend, volatility, time_to_expiry)
    if option_type == OptionType.PUT:
        return black_scholes_put(spot, strike, rate, dividend, volatility, time_to_expiry)
    raise InvalidArgumentError(f"CRITICAL: unknown option type {option_type!r}")


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    time_to_expiry: float,
    tolerance: float = PUT_CALL_PARITY_TOLERANCE,
) -> tuple[bool, float]:
    """
    Verify put-call parity holds.

    [T1] Put-Call Parity: C - P = S*e^(-qT) - K*e^(-rT)

    Returns
    -------
    tuple[bool, float]
        (parity_holds, error)
    """
    actual_diff = call_price - put_price
    expected_diff = _forward_intrinsic(spot, strike, rate, dividend, time_to_expiry)

    error = abs(actual_diff - expected_diff)
    parity_holds = error < tolerance

    return parity_holds, error


def _validate_inputs(
    spot: float,
    strike: float,
    volatility: float,
    time_to_expiry: float,
) -> None:
    """Validate Black-Scholes inputs."""
    if spot <= 0:
        raise InvalidArgumentError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike <= 0:
        raise InvalidArgumentError(f"CRITICAL: strike must be > 0, got {strike}")
    if volatility < 0:
        raise InvalidArgumentError(f"CRITICAL: volatility must be >= 0, got {volatility}")
    if time_to_expiry < 0:
        raise InvalidArgumentError(
            f"CRITICAL: time_to_expiry must be >= 0, got {time_to_expiry}"
        )
