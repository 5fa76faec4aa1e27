"""Value synthesis helpers for probing scoped attributes.

Scope variance needs a value that differs from every stored one. The
starting point is the largest stored value, or a zero value chosen by the
column's type tag when nothing is stored; the successor is then derived
from that value's own type, falling back to string succession.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable
from uuid import UUID, uuid4

from shoulda_matchers.schema import ColumnType

_UUID_SPACE = 1 << 128

_ZERO_VALUES: dict[ColumnType, Callable[[], Any]] = {
    "text": lambda: "",
    "datetime": lambda: datetime.now(timezone.utc),
    "uuid": uuid4,
    "numeric": lambda: 0,
}


def zero_value_for(column_type: ColumnType | None) -> Any:
    """Return a fresh placeholder value for a column with no stored values.

    Unknown or missing type tags are treated as numeric (foreign keys).
    """
    factory = _ZERO_VALUES.get(column_type, _ZERO_VALUES["numeric"])
    return factory()


def max_value(values: Iterable[Any]) -> Any:
    """Largest non-None value, or None when every value is None."""
    present = [value for value in values if value is not None]
    if not present:
        return None
    return max(present)


def next_value(previous: Any) -> Any:
    """Return the successor of ``previous``.

    Booleans flip, numbers step by one, dates and datetimes advance a day,
    UUIDs advance by one (wrapping), anything else is string-incremented.
    """
    if isinstance(previous, bool):
        return not previous
    if isinstance(previous, (int, float, Decimal)):
        return previous + 1
    if isinstance(previous, (datetime, date)):
        return previous + timedelta(days=1)
    if isinstance(previous, UUID):
        return UUID(int=(previous.int + 1) % _UUID_SPACE)
    return string_successor(str(previous))


def unused_value(previous: Any, stored: Iterable[Any]) -> Any:
    """Return a successor of ``previous`` that is not among ``stored``.

    Successors are tried in turn. Types with few values (booleans) can run
    out; nil is used then, when no stored record holds it.
    """
    taken = list(stored)
    candidate = next_value(previous)
    for _ in range(len(taken) + 1):
        if candidate not in taken:
            return candidate
        candidate = next_value(candidate)
    return None if None not in taken else candidate


def string_successor(value: str) -> str:
    """Increment a string the way a human counts: "az" -> "ba", "a9" -> "b0".

    The rightmost ASCII letter or digit is incremented and carries leftwards
    across separators; when every alphanumeric rolls over, a new leading
    character is inserted ("zz" -> "aaa", "99" -> "100"). Strings without
    alphanumerics increment their last character. The empty string's
    successor is "a" so a successor always differs from its input.
    """
    if not value:
        return "a"

    chars = list(value)
    positions = [i for i, c in enumerate(chars) if c.isascii() and c.isalnum()]
    if not positions:
        chars[-1] = chr(ord(chars[-1]) + 1)
        return "".join(chars)

    carry = ""
    for i in reversed(positions):
        c = chars[i]
        if c == "z":
            chars[i], carry = "a", "a"
        elif c == "Z":
            chars[i], carry = "A", "A"
        elif c == "9":
            chars[i], carry = "0", "1"
        else:
            chars[i] = chr(ord(c) + 1)
            return "".join(chars)

    chars.insert(positions[0], carry)
    return "".join(chars)


def swap_case(value: Any) -> Any:
    """Swap letter case of strings; other values pass through unchanged."""
    if isinstance(value, str):
        return value.swapcase()
    return value
