"""
Rate and fee calculations

Pure integer functions mirroring the program's fee split, rate derivation
and tier change pricing.
"""

from .constants import BPS_DENOMINATOR, MAX_FEE_BPS, RATE_SCALE
from .exceptions import InvalidFeeBps, InvalidRate
from .fixed_point import (
    mul_div,
    require_int,
    require_non_negative,
    time_for_amount,
    to_rate,
)
from .models import SubscriptionQuote, UpgradeCost


def _check_fee_bps(fee_bps: int, max_fee_bps: int) -> None:
    require_int("fee_bps", fee_bps)
    if fee_bps < 0 or fee_bps > max_fee_bps:
        raise InvalidFeeBps(
            f"fee_bps must be within [0, {max_fee_bps}], got {fee_bps}"
        )


def compute_fee(amount: int, fee_bps: int, max_fee_bps: int = MAX_FEE_BPS) -> int:
    """
    Protocol fee taken from a gross amount.

    Args:
        amount: Gross amount in base units
        fee_bps: Fee in basis points (10,000 = 100%)
        max_fee_bps: Upper bound enforced by the program

    Returns:
        amount * fee_bps / 10,000, truncated

    Example:
        >>> compute_fee(10_000, 250)
        250
    """
    require_non_negative("amount", amount)
    _check_fee_bps(fee_bps, max_fee_bps)
    return mul_div(amount, fee_bps, BPS_DENOMINATOR)


def compute_net_amount(amount: int, fee_bps: int, max_fee_bps: int = MAX_FEE_BPS) -> int:
    """Amount left after the protocol fee is deducted."""
    return amount - compute_fee(amount, fee_bps, max_fee_bps)


def compute_rate(amount: int, duration_seconds: int) -> int:
    """
    Scaled per-second rate that releases amount over duration_seconds.

    Raises:
        InvalidDuration: if duration_seconds <= 0
    """
    return to_rate(amount, duration_seconds)


def compute_remaining_duration(unvested: int, rate_per_second: int) -> int:
    """
    Seconds left before unvested is fully released at rate_per_second.

    Raises:
        InvalidRate: if rate_per_second <= 0
    """
    return time_for_amount(unvested, rate_per_second)


def compute_upgrade_cost(unvested: int, current_rate: int, new_rate: int) -> UpgradeCost:
    """
    Price a tier change that keeps the remaining time and changes the rate.

    The remaining duration at the current rate is re-priced at the new rate.
    A result above the unvested amount is an upgrade (the caller pays the
    difference); anything else is a downgrade (the difference is refunded).

    Args:
        unvested: Amount not yet vested in the segment
        current_rate: Scaled rate the segment vests at today
        new_rate: Scaled rate of the target tier

    Returns:
        UpgradeCost with new_cost, absolute difference and is_upgrade
    """
    require_int("new_rate", new_rate)
    if new_rate <= 0:
        raise InvalidRate(f"new rate must be positive, got {new_rate}")

    remaining_duration = compute_remaining_duration(unvested, current_rate)
    new_cost = mul_div(remaining_duration, new_rate, RATE_SCALE)

    is_upgrade = new_cost > unvested
    difference = new_cost - unvested if is_upgrade else unvested - new_cost
    return UpgradeCost(new_cost=new_cost, difference=difference, is_upgrade=is_upgrade)


def quote_subscription(
    amount: int,
    duration_seconds: int,
    fee_bps: int,
    max_fee_bps: int = MAX_FEE_BPS,
) -> SubscriptionQuote:
    """
    Split a deposit into fee and vesting principal.

    The fee goes to the treasury up front; only the net amount is streamed,
    so the rate is derived from the net amount.
    """
    fee = compute_fee(amount, fee_bps, max_fee_bps)
    net_amount = amount - fee
    return SubscriptionQuote(
        amount=amount,
        fee=fee,
        net_amount=net_amount,
        rate_per_second=compute_rate(net_amount, duration_seconds),
    )
