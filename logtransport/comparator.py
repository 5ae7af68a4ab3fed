"""Comparison operators applied to values pulled out of log data."""

from __future__ import annotations

import datetime as _dt
import enum
import math
import re
from typing import Any, Callable, Iterable, Optional

from logtransport.query_value import QueryValue, ValueKind, to_query_value

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(\.\d+)?"
    r"([Zz]|[+-]\d{2}:\d{2})"
)


def _parse_rfc3339(text: str) -> Optional[_dt.datetime]:
    """Parse an RFC 3339 timestamp into a UTC datetime, or return None."""
    match = _RFC3339.fullmatch(text)
    if match is None:
        return None
    year, month, day, hour, minute, second = (int(match.group(i)) for i in range(1, 7))
    fraction = match.group(7)
    micro = int((fraction[1:] + "000000")[:6]) if fraction else 0
    offset_text = match.group(8)
    if offset_text in ("Z", "z"):
        offset = _dt.timedelta(0)
    else:
        sign = -1 if offset_text[0] == "-" else 1
        hours, minutes = int(offset_text[1:3]), int(offset_text[4:6])
        if hours > 23 or minutes > 59:
            return None
        offset = sign * _dt.timedelta(hours=hours, minutes=minutes)
    try:
        moment = _dt.datetime(
            year, month, day, hour, minute, second, micro, tzinfo=_dt.timezone(offset)
        )
    except ValueError:
        return None
    return moment.astimezone(_dt.timezone.utc)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _remainder_is_zero(actual: float, divisor: float) -> bool:
    if divisor == 0.0 or math.isnan(divisor) or not math.isfinite(actual):
        return False
    return math.fmod(actual, divisor) == 0.0


def _coerce_expected(expected: Any) -> Optional[QueryValue]:
    if expected is None or isinstance(expected, QueryValue):
        return expected
    return to_query_value(expected)


class Comparator(enum.Enum):
    """An operator that tests field values against an optional expected value."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"
    MATCHES = "matches"
    NOT_MATCHES = "not_matches"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    IN = "in"
    NOT_IN = "not_in"
    HAS_ALL = "has_all"
    HAS_ANY = "has_any"
    HAS_NONE = "has_none"
    LENGTH = "length"
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"
    IS_MULTIPLE_OF = "is_multiple_of"
    IS_DIVISIBLE_BY = "is_divisible_by"
    BEFORE = "before"
    AFTER = "after"
    SAME_DAY = "same_day"
    FUNCTION = "function"

    def compare(self, field_value: Any, expected: Any = None) -> bool:
        """Test a single field value."""
        return self.evaluate([field_value], expected)

    def evaluate(self, field_values: Iterable[Any], expected: Any = None) -> bool:
        """Return True if any of ``field_values`` satisfies the comparison.

        ``expected`` is a :class:`QueryValue`, a value convertible to one, or
        None when the operator takes no operand.  Date comparisons decide on
        the first value that parses as an RFC 3339 timestamp.
        """
        expected = _coerce_expected(expected)
        for value in field_values:
            decided = self._check(value, expected)
            if decided is not None:
                return decided
        return False

    def _check(self, val: Any, expected: Optional[QueryValue]) -> Optional[bool]:
        """Return True/False to decide the evaluation, None to move on."""
        kind = expected.kind if expected is not None else None
        op = Comparator

        if expected is None:
            if self is op.EXISTS:
                return True
            if self is op.NOT_EXISTS:
                return False
            if self is op.EMPTY:
                return True if _is_array(val) and len(val) == 0 else None
            if self is op.NOT_EMPTY:
                return True if _is_array(val) and len(val) > 0 else None
            return None

        if self is op.EQUALS:
            return True if _compare_values(val, expected) else None
        if self is op.NOT_EQUALS:
            return True if not _compare_values(val, expected) else None
        if self in _NUMERIC:
            return True if _compare_numbers(val, expected, _NUMERIC[self]) else None
        if self is op.LENGTH:
            if _is_array(val) and _compare_numbers(
                float(len(val)), expected, lambda a, b: a == b
            ):
                return True
            return None
        if self is op.IS_MULTIPLE_OF or self is op.IS_DIVISIBLE_BY:
            if _is_number(val) and kind is ValueKind.NUMBER:
                if _remainder_is_zero(float(val), expected.value):
                    return True
            return None
        if self is op.FUNCTION:
            if kind is ValueKind.FUNCTION and expected.value(val):
                return True
            return None

        if kind is ValueKind.REGEX and self in (op.MATCHES, op.NOT_MATCHES):
            if isinstance(val, str):
                hit = expected.value.search(val) is not None
                if hit == (self is op.MATCHES):
                    return True
            return None

        if kind is ValueKind.STRING:
            return self._check_string(val, expected.value)
        if kind is ValueKind.ARRAY:
            return self._check_array(val, expected.value)
        if kind is ValueKind.DATETIME:
            return self._check_datetime(val, expected.value)
        return None

    def _check_string(self, val: Any, text: str) -> Optional[bool]:
        op = Comparator
        if self is op.STARTS_WITH:
            return True if isinstance(val, str) and val.startswith(text) else None
        if self is op.ENDS_WITH:
            return True if isinstance(val, str) and val.endswith(text) else None
        if self is op.CONTAINS:
            if isinstance(val, str):
                return True if text in val else None
            if _is_array(val):
                if any(isinstance(item, str) and text in item for item in val):
                    return True
            return None
        if self is op.NOT_CONTAINS:
            return True if isinstance(val, str) and text not in val else None
        return None

    def _check_array(self, val: Any, items: tuple) -> Optional[bool]:
        op = Comparator
        if self is op.IN:
            return True if any(_compare_values(val, item) for item in items) else None
        if self is op.NOT_IN:
            return True if not any(_compare_values(val, item) for item in items) else None
        if self in (op.HAS_ALL, op.HAS_ANY, op.HAS_NONE):
            if not _is_array(val):
                return None
            present = [any(_compare_values(actual, item) for actual in val) for item in items]
            if self is op.HAS_ALL:
                return True if all(present) else None
            if self is op.HAS_ANY:
                return True if any(present) else None
            return True if not any(present) else None
        if self in (op.BETWEEN, op.NOT_BETWEEN):
            if len(items) != 2:
                return None
            start, end = items
            inside = _compare_numbers(val, start, lambda a, b: a >= b) and _compare_numbers(
                val, end, lambda a, b: a <= b
            )
            return True if inside == (self is op.BETWEEN) else None
        return None

    def _check_datetime(self, val: Any, moment: _dt.datetime) -> Optional[bool]:
        op = Comparator
        if self not in (op.BEFORE, op.AFTER, op.SAME_DAY):
            return None
        if not isinstance(val, str):
            return None
        actual = _parse_rfc3339(val)
        if actual is None:
            return None
        if self is op.BEFORE:
            return actual < moment
        if self is op.AFTER:
            return actual > moment
        return actual.date() == moment.date()


_NUMERIC: dict[Comparator, Callable[[float, float], bool]] = {
    Comparator.GREATER_THAN: lambda a, b: a > b,
    Comparator.LESS_THAN: lambda a, b: a < b,
    Comparator.GREATER_THAN_OR_EQUAL: lambda a, b: a >= b,
    Comparator.LESS_THAN_OR_EQUAL: lambda a, b: a <= b,
}


def _compare_values(actual: Any, expected: QueryValue) -> bool:
    kind = expected.kind
    if isinstance(actual, str):
        if kind is ValueKind.STRING:
            return actual == expected.value
        if kind is ValueKind.REGEX:
            return expected.value.search(actual) is not None
        if kind is ValueKind.DATETIME:
            parsed = _parse_rfc3339(actual)
            return parsed is not None and parsed == expected.value
        return False
    if isinstance(actual, bool):
        return kind is ValueKind.BOOLEAN and actual == expected.value
    if _is_number(actual):
        return kind is ValueKind.NUMBER and float(actual) == expected.value
    if _is_array(actual):
        if kind is not ValueKind.ARRAY or len(actual) != len(expected.value):
            return False
        return all(_compare_values(a, b) for a, b in zip(actual, expected.value))
    if actual is None:
        return kind is ValueKind.NULL
    return False


def _compare_numbers(
    actual: Any, expected: QueryValue, compare: Callable[[float, float], bool]
) -> bool:
    if _is_number(actual) and expected.kind is ValueKind.NUMBER:
        return compare(float(actual), expected.value)
    return False