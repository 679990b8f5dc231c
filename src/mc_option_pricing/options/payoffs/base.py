"""
Vanilla option payoffs.

Payoffs form a closed set of two immutable variants, CallPayoff and
PutPayoff, both pure functions of a single terminal spot value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from mc_option_pricing.errors import InvalidArgumentError


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


def _validate_strike(strike: float) -> None:
    if not strike > 0:
        raise InvalidArgumentError(f"CRITICAL: strike must be > 0, got {strike}")


@dataclass(frozen=True)
class CallPayoff:
    """
    European call payoff.

    [T1] Call payoff: max(S - K, 0)

    Attributes
    ----------
    strike : float
        Strike price (> 0)
    """

    strike: float

    def __post_init__(self) -> None:
        _validate_strike(self.strike)

    @property
    def option_type(self) -> OptionType:
        return OptionType.CALL

    def evaluate(self, spot: float) -> float:
        """
        Calculate call payoff at expiry.

        Parameters
        ----------
        spot : float
            Spot price at expiry

        Returns
        -------
        float
            Option payoff (intrinsic value)
        """
        val = spot - self.strike
        return val if val > 0.0 else 0.0

    def __call__(self, spot: float) -> float:
        return self.evaluate(spot)


@dataclass(frozen=True)
class PutPayoff:
    """
    European put payoff.

    [T1] Put payoff: max(K - S, 0)

    Attributes
    ----------
    strike : float
        Strike price (> 0)
    """

    strike: float

    def __post_init__(self) -> None:
        _validate_strike(self.strike)

    @property
    def option_type(self) -> OptionType:
        return OptionType.PUT

    def evaluate(self, spot: float) -> float:
        """Calculate put payoff at expiry."""
        val = self.strike - spot
        return val if val > 0.0 else 0.0

    def __call__(self, spot: float) -> float:
        return self.evaluate(spot)


#: Closed payoff variant accepted by the simulation engine
Payoff = Union[CallPayoff, PutPayoff]


def make_payoff(strike: float, option_type: OptionType | str) -> Payoff:
    """
    Build the payoff variant for an option type.

    Parameters
    ----------
    strike : float
        Strike price
    option_type : OptionType or str
        CALL/PUT, or "call"/"put"

    Returns
    -------
    Payoff
        CallPayoff or PutPayoff

    Raises
    ------
    InvalidArgumentError
        If strike <= 0 or option type is unknown
    """
    if isinstance(option_type, str):
        try:
            option_type = OptionType(option_type.lower())
        except ValueError as e:
            raise InvalidArgumentError(
                f"CRITICAL: unknown option type {option_type!r}, expected 'call' or 'put'"
            ) from e

    if option_type == OptionType.CALL:
        return CallPayoff(strike)
    if option_type == OptionType.PUT:
        return PutPayoff(strike)
    raise InvalidArgumentError(
        f"CRITICAL: unknown option type {option_type!r}, expected OptionType.CALL or OptionType.PUT"
    )


def calculate_moneyness(spot: float, strike: float) -> float:
    """
    Calculate option moneyness.

    [T1] Moneyness = S/K
    """
    _validate_strike(strike)
    return spot / strike


def is_in_the_money(spot: float, payoff: Payoff) -> bool:
    """
    Check if an option is in the money at the given spot.

    [T1] Call ITM: S > K
    [T1] Put ITM: S < K
    """
    if payoff.option_type == OptionType.CALL:
        return spot > payoff.strike
    return spot < payoff.strike
