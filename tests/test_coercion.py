"""
Tests for numeric and date coercion.
"""
import math
import pytest
from datetime import date, datetime
from decimal import Decimal

import pandas as pd

from ledger.coercion import coerce, parse_number, parse_date, is_blank


class TestCoerce:
    """coerce() is total and defaults to zero."""

    @pytest.mark.parametrize("value,expected", [
        ("", 0),
        ("abc", 0),
        ("12.5", 12.5),
        (-3, -3),
        (42.25, 42.25),
        ("  -7.5 ", -7.5),
        ("1e3", 1000.0),
        (None, 0),
        ([1, 2], 0),
        ({"profit": 1}, 0),
        (True, 0),
        ("nan", 0),
        (float("inf"), 0),
        (Decimal("2.5"), 2.5),
    ])
    def test_coerce_values(self, value, expected):
        assert coerce(value) == expected

    def test_numbers_pass_through_unchanged(self):
        assert coerce(7) == 7
        assert isinstance(coerce(7), int)
        assert coerce(-0.1) == -0.1

    def test_result_is_always_finite(self):
        for value in ["", "x", "inf", "-inf", "nan", object(), float("nan")]:
            assert math.isfinite(coerce(value))


class TestParseNumber:
    """parse_number() distinguishes invalid input from zero."""

    def test_invalid_returns_none(self):
        assert parse_number("abc") is None
        assert parse_number("") is None
        assert parse_number(None) is None
        assert parse_number(False) is None

    def test_zero_is_valid(self):
        assert parse_number("0") == 0.0
        assert parse_number(0) == 0


class TestParseDate:
    """parse_date() returns a date or None."""

    def test_iso_string(self):
        assert parse_date("2024-01-05") == date(2024, 1, 5)

    def test_date_passes_through(self):
        assert parse_date(date(2023, 12, 31)) == date(2023, 12, 31)

    def test_datetime_truncated(self):
        assert parse_date(datetime(2024, 3, 1, 15, 30)) == date(2024, 3, 1)

    def test_timestamp_truncated(self):
        assert parse_date(pd.Timestamp("2024-06-15 09:00")) == date(2024, 6, 15)

    @pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", "2024-13-45", 12345, pd.NaT])
    def test_invalid_returns_none(self, value):
        assert parse_date(value) is None


def test_is_blank():
    assert is_blank(None)
    assert is_blank("")
    assert is_blank("  ")
    assert not is_blank("0")
    assert not is_blank(0)
