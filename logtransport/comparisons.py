"""Single-operator conditions on a field value, with shorthand constructors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from logtransport.comparator import Comparator
from logtransport.query_value import QueryValue, to_query_value


@dataclass(frozen=True)
class FieldComparison:
    """A comparator paired with the value it compares against.

    A ``value`` that is not already a :class:`QueryValue` is converted to one.
    """

    comparator: Comparator
    value: QueryValue

    def __post_init__(self) -> None:
        if not isinstance(self.value, QueryValue):
            object.__setattr__(self, "value", to_query_value(self.value))

    def evaluate(self, field_value: Any) -> bool:
        """Return True if ``field_value`` satisfies this comparison."""
        return self.comparator.compare(field_value, self.value)


def gt(value: Any) -> FieldComparison:
    """The field must be a number greater than ``value``."""
    return FieldComparison(Comparator.GREATER_THAN, to_query_value(value))


def lt(value: Any) -> FieldComparison:
    """The field must be a number less than ``value``."""
    return FieldComparison(Comparator.LESS_THAN, to_query_value(value))


def eq(value: Any) -> FieldComparison:
    """The field must equal ``value``."""
    return FieldComparison(Comparator.EQUALS, to_query_value(value))