"""Typed values that field conditions compare log data against."""

from __future__ import annotations

import datetime as _dt
import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class ValueKind(enum.Enum):
    """The kind of value a :class:`QueryValue` holds."""

    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    ARRAY = "Array"
    REGEX = "Regex"
    DATETIME = "DateTime"
    DURATION = "Duration"
    NULL = "Null"
    FUNCTION = "Function"


@dataclass(frozen=True)
class QueryValue:
    """A value used as the expected side of a comparison.

    Numbers are always held as floats, arrays as tuples of ``QueryValue``,
    date-times as timezone-aware UTC datetimes.
    """

    kind: ValueKind
    value: Any = None

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "Null"
        if self.kind is ValueKind.FUNCTION:
            return "Function(<callable>)"
        if self.kind is ValueKind.ARRAY:
            inner = ", ".join(repr(item) for item in self.value)
            return f"Array([{inner}])"
        if self.kind is ValueKind.REGEX:
            return f"Regex({self.value.pattern!r})"
        return f"{self.kind.value}({self.value!r})"


def _to_utc(moment: _dt.datetime) -> _dt.datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=_dt.timezone.utc)
    return moment.astimezone(_dt.timezone.utc)


def to_query_value(value: Any) -> QueryValue:
    """Convert a Python or JSON-like value into a :class:`QueryValue`.

    Objects (mappings) have no query representation and become ``Null``.
    Raises ``TypeError`` for values that cannot be converted.
    """
    if isinstance(value, QueryValue):
        return value
    if value is None:
        return QueryValue(ValueKind.NULL)
    if isinstance(value, bool):
        return QueryValue(ValueKind.BOOLEAN, value)
    if isinstance(value, (int, float)):
        return QueryValue(ValueKind.NUMBER, float(value))
    if isinstance(value, str):
        return QueryValue(ValueKind.STRING, value)
    if isinstance(value, re.Pattern):
        return QueryValue(ValueKind.REGEX, value)
    if isinstance(value, _dt.datetime):
        return QueryValue(ValueKind.DATETIME, _to_utc(value))
    if isinstance(value, _dt.timedelta):
        return QueryValue(ValueKind.DURATION, value)
    if isinstance(value, (list, tuple)):
        return QueryValue(ValueKind.ARRAY, tuple(to_query_value(item) for item in value))
    if isinstance(value, Mapping):
        return QueryValue(ValueKind.NULL)
    if callable(value):
        return QueryValue(ValueKind.FUNCTION, value)
    raise TypeError(f"cannot convert {type(value).__name__} to a query value")