"""
Fixed-point integer arithmetic

Every money and rate value is a Python int. Division truncates toward
zero to match the on-chain program, and rates are scaled by RATE_SCALE so
sub-unit per-second amounts survive integer storage.
"""

from .constants import RATE_SCALE
from .exceptions import InvalidAmount, InvalidDuration, InvalidRate


def require_int(name: str, value) -> int:
    """
    Reject anything that is not an exact integer.

    Floats are refused outright: a float that reaches the vesting math has
    already lost precision.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


def require_non_negative(name: str, value: int) -> int:
    """Return value if it is a non-negative int, else raise InvalidAmount."""
    require_int(name, value)
    if value < 0:
        raise InvalidAmount(f"{name} must be non-negative, got {value}")
    return value


def truncating_div(numerator: int, divisor: int) -> int:
    """Integer division rounding toward zero."""
    require_int("numerator", numerator)
    require_int("divisor", divisor)
    if divisor == 0:
        raise InvalidRate("division by zero")
    quotient = abs(numerator) // abs(divisor)
    if (numerator < 0) != (divisor < 0):
        return -quotient
    return quotient


def mul_div(a: int, b: int, divisor: int) -> int:
    """
    Compute a * b / divisor with a single truncation at the end.

    Raises:
        InvalidRate: if divisor is zero or negative
    """
    require_int("a", a)
    require_int("b", b)
    require_int("divisor", divisor)
    if divisor <= 0:
        raise InvalidRate(f"divisor must be positive, got {divisor}")
    return truncating_div(a * b, divisor)


def to_rate(amount: int, duration_seconds: int) -> int:
    """
    Scaled per-second rate: amount * RATE_SCALE / duration.

    Raises:
        InvalidDuration: if duration_seconds <= 0
    """
    require_non_negative("amount", amount)
    require_int("duration_seconds", duration_seconds)
    if duration_seconds <= 0:
        raise InvalidDuration(
            f"duration must be positive, got {duration_seconds}"
        )
    return mul_div(amount, RATE_SCALE, duration_seconds)


def time_for_amount(amount: int, rate_per_second: int) -> int:
    """Seconds a scaled rate needs to release amount: amount * RATE_SCALE / rate."""
    require_non_negative("amount", amount)
    require_int("rate_per_second", rate_per_second)
    if rate_per_second <= 0:
        raise InvalidRate(f"rate must be positive, got {rate_per_second}")
    return mul_div(amount, RATE_SCALE, rate_per_second)


def amount_for_time(elapsed_seconds: int, rate_per_second: int) -> int:
    """Amount a scaled rate releases in elapsed_seconds: elapsed * rate / RATE_SCALE."""
    require_int("elapsed_seconds", elapsed_seconds)
    require_int("rate_per_second", rate_per_second)
    if rate_per_second < 0:
        raise InvalidRate(f"rate must not be negative, got {rate_per_second}")
    return mul_div(elapsed_seconds, rate_per_second, RATE_SCALE)
