"""Query trees: logical combinations of conditions on paths into log data."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Any, Iterable, Union

from logtransport.comparisons import FieldComparison
from logtransport.field_path import FieldPath, parse_field_path


class LogicalOperator(enum.Enum):
    """How the results of child conditions are combined."""

    AND = "and"
    OR = "or"

    def combine(self, results: Iterable[bool]) -> bool:
        """Fold lazily evaluated results with all() or any()."""
        return all(results) if self is LogicalOperator.AND else any(results)


def _as_operator(operator: Union[LogicalOperator, str]) -> LogicalOperator:
    if isinstance(operator, LogicalOperator):
        return operator
    if isinstance(operator, str):
        try:
            return LogicalOperator(operator.lower())
        except ValueError:
            raise ValueError(f"unknown logical operator: {operator!r}") from None
    raise TypeError(f"expected a logical operator, got {type(operator).__name__}")


def _check_field_node(node: Any) -> "FieldNode":
    if isinstance(node, (FieldComparison, FieldLogic)):
        return node
    raise TypeError(f"expected FieldComparison or FieldLogic, got {type(node).__name__}")


def _check_query_node(node: Any) -> "QueryNode":
    if isinstance(node, (FieldQueryNode, QueryLogicNode)):
        return node
    raise TypeError(f"expected FieldQueryNode or QueryLogicNode, got {type(node).__name__}")


@dataclass(frozen=True)
class FieldLogic:
    """A logical combination of conditions applied to one field value."""

    operator: LogicalOperator
    conditions: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", _as_operator(self.operator))
        object.__setattr__(
            self, "conditions", tuple(_check_field_node(c) for c in self.conditions)
        )

    def with_node(self, node: "FieldNode") -> FieldLogic:
        """Return a copy with ``node`` appended to the conditions."""
        return replace(self, conditions=self.conditions + (_check_field_node(node),))

    def with_nodes(self, nodes: Iterable["FieldNode"]) -> FieldLogic:
        """Return a copy with all of ``nodes`` appended to the conditions."""
        added = tuple(_check_field_node(node) for node in nodes)
        return replace(self, conditions=self.conditions + added)

    def evaluate(self, field_value: Any) -> bool:
        return self.operator.combine(c.evaluate(field_value) for c in self.conditions)


FieldNode = Union[FieldComparison, FieldLogic]


@dataclass(frozen=True)
class FieldQueryNode:
    """A condition applied to whatever a path reaches in the data.

    ``path`` may be given as a string and is parsed on construction.
    """

    path: FieldPath
    node: FieldNode

    def __post_init__(self) -> None:
        if isinstance(self.path, str):
            object.__setattr__(self, "path", parse_field_path(self.path))
        elif not isinstance(self.path, FieldPath):
            raise TypeError(f"expected a path, got {type(self.path).__name__}")
        _check_field_node(self.node)

    def evaluate(self, value: Any) -> bool:
        """False when the path reaches nothing, else the condition's result."""
        try:
            field_value = self.path.extract(value)
        except LookupError:
            return False
        return self.node.evaluate(field_value)


@dataclass(frozen=True)
class QueryLogicNode:
    """A logical combination of whole queries."""

    operator: LogicalOperator
    children: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", _as_operator(self.operator))
        object.__setattr__(
            self, "children", tuple(_check_query_node(c) for c in self.children)
        )

    def with_node(self, node: "QueryNode") -> QueryLogicNode:
        """Return a copy with ``node`` appended to the children."""
        return replace(self, children=self.children + (_check_query_node(node),))

    def evaluate(self, value: Any) -> bool:
        return self.operator.combine(child.evaluate(value) for child in self.children)


QueryNode = Union[FieldQueryNode, QueryLogicNode]


def and_(*args: QueryNode) -> QueryLogicNode:
    """A query that holds when every argument holds."""
    return QueryLogicNode(LogicalOperator.AND, args)


def or_(*args: QueryNode) -> QueryLogicNode:
    """A query that holds when any argument holds."""
    return QueryLogicNode(LogicalOperator.OR, args)


def field_query(path: Union[str, FieldPath], node: FieldNode) -> FieldQueryNode:
    """Apply ``node`` to the value found at ``path``."""
    return FieldQueryNode(path, node)


def field_logic(operator: Union[LogicalOperator, str], *args: FieldNode) -> FieldLogic:
    """Combine one or more field conditions with ``operator`` ("and" or "or")."""
    if not args:
        raise ValueError("field_logic needs at least one condition")
    return FieldLogic(operator, args)