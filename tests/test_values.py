"""Tests for scope value synthesis."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from shoulda_matchers.values import (
    max_value,
    next_value,
    string_successor,
    swap_case,
    unused_value,
    zero_value_for,
)


class TestStringSuccessor:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("a", "b"),
            ("az", "ba"),
            ("zz", "aaa"),
            ("a9", "b0"),
            ("99", "100"),
            ("Zz", "AAa"),
            ("1.9", "2.0"),
            ("slug-z", "sluh-a"),
            ("-", "."),
            ("", "a"),
        ],
    )
    def test_successor(self, value: str, expected: str) -> None:
        assert string_successor(value) == expected


class TestNextValue:
    def test_integer(self) -> None:
        assert next_value(1) == 2

    def test_decimal(self) -> None:
        assert next_value(Decimal("1.5")) == Decimal("2.5")

    def test_boolean_flips(self) -> None:
        assert next_value(True) is False
        assert next_value(False) is True

    def test_datetime_advances_a_day(self) -> None:
        moment = datetime(2024, 2, 28, 12, 0, tzinfo=timezone.utc)
        assert next_value(moment) == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)

    def test_date_advances_a_day(self) -> None:
        assert next_value(date(2023, 12, 31)) == date(2024, 1, 1)

    def test_uuid(self) -> None:
        assert next_value(UUID(int=0)) == UUID(int=1)

    def test_uuid_wraps(self) -> None:
        assert next_value(UUID(int=(1 << 128) - 1)) == UUID(int=0)

    def test_string_fallback(self) -> None:
        assert next_value("abc") == "abd"


class TestUnusedValue:
    def test_plain_successor_when_free(self) -> None:
        assert unused_value(9, [5, 9]) == 10

    def test_skips_stored_successor(self) -> None:
        assert unused_value(True, [True]) is False

    def test_exhausted_booleans_fall_back_to_nil(self) -> None:
        assert unused_value(True, [True, False]) is None

    def test_exhausted_booleans_with_nil_stored(self) -> None:
        """No free value exists; a colliding successor is returned."""
        assert unused_value(True, [True, False, None]) in (True, False)


class TestZeroValue:
    def test_text(self) -> None:
        assert zero_value_for("text") == ""

    def test_numeric(self) -> None:
        assert zero_value_for("numeric") == 0

    def test_unknown_column_is_numeric(self) -> None:
        assert zero_value_for(None) == 0

    def test_datetime_is_now(self) -> None:
        before = datetime.now(timezone.utc)
        value = zero_value_for("datetime")
        assert isinstance(value, datetime)
        assert value >= before

    def test_uuid_is_fresh(self) -> None:
        first = zero_value_for("uuid")
        assert isinstance(first, UUID)
        assert first != zero_value_for("uuid")


class TestHelpers:
    def test_max_value_ignores_none(self) -> None:
        assert max_value([None, 3, 1]) == 3

    def test_max_value_all_none(self) -> None:
        assert max_value([None, None]) is None
        assert max_value([]) is None

    def test_swap_case(self) -> None:
        assert swap_case("ABC") == "abc"
        assert swap_case("aBc") == "AbC"
        assert swap_case(5) == 5
        assert swap_case(None) is None
