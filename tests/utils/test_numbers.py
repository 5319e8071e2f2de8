"""Tests for the numeric input helpers."""

import pytest

from seance_tracker.utils.numbers import SQLITE_MAX_INTEGER, as_storable_number


class TestAsStorableNumber:
    """Tests for as_storable_number."""

    def test_small_numbers_unchanged(self):
        assert as_storable_number(45) == 45
        assert isinstance(as_storable_number(45), int)
        assert as_storable_number(2.5) == 2.5

    def test_integer_limit_stays_integer(self):
        assert isinstance(as_storable_number(SQLITE_MAX_INTEGER), int)

    def test_large_integer_becomes_float(self):
        value = as_storable_number(10**20)

        assert isinstance(value, float)
        assert value == 10**20

    @pytest.mark.parametrize("value", [
        None, "10", True, False, float("nan"), float("inf"), 10**400,
    ])
    def test_rejected_values(self, value):
        assert as_storable_number(value) is None
