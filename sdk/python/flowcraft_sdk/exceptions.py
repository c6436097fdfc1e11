"""
Exceptions for Flowcraft SDK

Calculation errors are raised by the pure vesting/fee functions when an
input violates a precondition. Network, RPC and decode errors come from
the ledger client and are never raised by the calculation core.
"""

from typing import Optional


class FlowcraftError(Exception):
    """Base exception for all Flowcraft SDK errors."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code is not None:
            return f"[{self.code}] {self.message}"
        return self.message


# Calculation errors

class CalculationError(FlowcraftError):
    """An arithmetic precondition was violated."""


class InvalidDuration(CalculationError):
    """Duration is not positive where a rate must be derived from it."""


class InvalidRate(CalculationError):
    """Rate is zero or negative where it is used as a divisor."""


class InvalidFeeBps(CalculationError):
    """Fee basis points fall outside [0, max_fee_bps]."""


class InvalidAmount(CalculationError):
    """A money amount is negative."""


class SegmentLimitExceeded(CalculationError):
    """A stream carries more segments than the program allows."""


class StreamNotExpired(CalculationError):
    """Folding was requested while some segment is still vesting."""


# Ledger client errors

class NetworkError(FlowcraftError):
    """The RPC endpoint could not be reached or answered with an HTTP error."""


class RpcError(FlowcraftError):
    """The RPC endpoint returned a JSON-RPC error object."""


class AccountDecodeError(FlowcraftError):
    """Account data does not match the expected layout."""


class InvalidAddress(FlowcraftError):
    """A string is not a valid base58 encoded 32-byte address."""
