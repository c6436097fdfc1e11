"""
Tests for fixed-point integer helpers.
"""

import pytest

from flowcraft_sdk.constants import RATE_SCALE
from flowcraft_sdk.exceptions import InvalidAmount, InvalidDuration, InvalidRate
from flowcraft_sdk.fixed_point import (
    amount_for_time,
    mul_div,
    require_int,
    time_for_amount,
    to_rate,
    truncating_div,
)


class TestTruncation:
    """Division must truncate toward zero like the program."""

    def test_truncates_positive(self):
        assert truncating_div(7, 2) == 3
        assert mul_div(10, 1, 3) == 3

    def test_truncates_toward_zero_for_negatives(self):
        # floor division would give -4
        assert truncating_div(-7, 2) == -3

    def test_single_truncation_after_product(self):
        # (1/3)*3 truncated stepwise would be 0
        assert mul_div(1, 3, 3) == 1

    def test_large_values_are_exact(self):
        big = 2 ** 128
        assert mul_div(big, RATE_SCALE, RATE_SCALE) == big

    def test_zero_divisor_is_invalid_rate(self):
        with pytest.raises(InvalidRate):
            mul_div(1, 1, 0)
        with pytest.raises(InvalidRate):
            truncating_div(1, 0)

    def test_negative_divisor_is_invalid_rate(self):
        with pytest.raises(InvalidRate):
            mul_div(1, 1, -5)


class TestTypeChecks:
    """Money math refuses floats."""

    def test_float_rejected(self):
        with pytest.raises(TypeError):
            require_int("amount", 1.0)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            require_int("amount", True)

    def test_float_rejected_in_rate(self):
        with pytest.raises(TypeError):
            to_rate(100.5, 10)


class TestRateConversions:

    def test_to_rate(self):
        assert to_rate(1000, 100) == 10 * RATE_SCALE

    def test_to_rate_rejects_non_positive_duration(self):
        with pytest.raises(InvalidDuration):
            to_rate(1000, 0)
        with pytest.raises(InvalidDuration):
            to_rate(1000, -1)

    def test_to_rate_rejects_negative_amount(self):
        with pytest.raises(InvalidAmount):
            to_rate(-1, 10)

    def test_time_for_amount(self):
        assert time_for_amount(500, 10 * RATE_SCALE) == 50

    def test_time_for_amount_zero_rate(self):
        with pytest.raises(InvalidRate):
            time_for_amount(500, 0)

    def test_amount_for_time(self):
        assert amount_for_time(50, 10 * RATE_SCALE) == 500

    def test_amount_for_time_sub_unit_rate_truncates(self):
        # half a unit per second
        assert amount_for_time(3, RATE_SCALE // 2) == 1

    def test_amount_for_time_negative_rate(self):
        with pytest.raises(InvalidRate):
            amount_for_time(10, -1)
