"""
Utility functions for Flowcraft
"""

from decimal import ROUND_DOWN, Decimal
from typing import Union

from .crypto import FlowcraftCrypto
from .exceptions import InvalidAddress
from .fixed_point import amount_for_time

SECONDS_PER_DAY = 86400


class Utils:
    """Display and unit helpers for Flowcraft amounts"""

    @staticmethod
    def to_base_units(amount: Union[str, int, Decimal], decimals: int) -> int:
        """
        Convert a token amount to integer base units, truncating extra digits.

        Args:
            amount: Amount in whole tokens
            decimals: Mint decimals

        Returns:
            Amount in base units

        Example:
            >>> Utils.to_base_units("100.5", 6)
            100500000
        """
        scaled = Decimal(str(amount)).scaleb(decimals)
        return int(scaled.quantize(Decimal(1), rounding=ROUND_DOWN))

    @staticmethod
    def from_base_units(amount: int, decimals: int) -> Decimal:
        """
        Convert integer base units to a Decimal token amount.

        Decimal keeps the value exact; convert to float only for charts.
        """
        return Decimal(amount).scaleb(-decimals)

    @staticmethod
    def format_token_amount(amount: int, decimals: int) -> str:
        """
        Format base units with a fixed number of decimals.

        Example:
            >>> Utils.format_token_amount(1500000, 6)
            '1.500000'
        """
        if decimals == 0:
            return str(amount)
        sign = "-" if amount < 0 else ""
        digits = str(abs(amount)).rjust(decimals + 1, "0")
        return f"{sign}{digits[:-decimals]}.{digits[-decimals:]}"

    @staticmethod
    def format_rate(rate_per_second: int, decimals: int, period: int = SECONDS_PER_DAY) -> str:
        """
        Format a scaled per-second rate as tokens per period (default: per day).
        """
        return Utils.format_token_amount(amount_for_time(period, rate_per_second), decimals)

    @staticmethod
    def is_valid_address(address: str) -> bool:
        """
        Validate address format (base58, 32 bytes).

        Args:
            address: Address string

        Returns:
            True if valid, False otherwise
        """
        try:
            FlowcraftCrypto.decode_address(address)
        except InvalidAddress:
            return False
        return True

    @staticmethod
    def format_address(address: str, length: int = 8) -> str:
        """
        Format address for display (shortened).

        Args:
            address: Full address
            length: Number of characters to show from each end

        Returns:
            Shortened address with ellipsis
        """
        if len(address) <= length * 2:
            return address
        return f"{address[:length]}...{address[-length:]}"

    @staticmethod
    def seconds_to_readable(seconds: int) -> str:
        """
        Convert seconds to human-readable format.

        Args:
            seconds: Number of seconds

        Returns:
            Readable string (e.g., "2h 30m", "3d 4h")
        """
        if seconds < 60:
            return f"{seconds}s"
        elif seconds < 3600:
            return f"{seconds // 60}m"
        elif seconds < 86400:
            hours, rest = divmod(seconds, 3600)
            return f"{hours}h {rest // 60}m" if rest >= 60 else f"{hours}h"
        else:
            days, rest = divmod(seconds, 86400)
            return f"{days}d {rest // 3600}h" if rest >= 3600 else f"{days}d"
