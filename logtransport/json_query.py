"""Build query trees from MongoDB-style JSON filter documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from logtransport.comparisons import eq, gt, lt
from logtransport.field_path import parse_field_path
from logtransport.nodes import FieldLogic, FieldNode, FieldQueryNode, QueryLogicNode, QueryNode
from logtransport.nodes import LogicalOperator

_LOGICAL = {"$and": LogicalOperator.AND, "$or": LogicalOperator.OR}
_COMPARISONS = {"$eq": eq, "$gt": gt, "$lt": lt}


class QueryParseError(ValueError):
    """A filter document does not describe a valid query."""


def _single_entry(mapping: Any, what: str) -> tuple[str, Any]:
    if not isinstance(mapping, Mapping):
        raise QueryParseError(f"expected an object for {what}, got {type(mapping).__name__}")
    if len(mapping) != 1:
        raise QueryParseError(f"expected exactly one key in {what}, got {len(mapping)}")
    return next(iter(mapping.items()))


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def query_from_json(value: Any) -> QueryNode:
    """Parse a document such as ``{"$and": [{"user.age": {"$gt": 25}}]}``.

    An object whose values are arrays is a logical operator; one whose values
    are objects is a field condition.  Raises :class:`QueryParseError`.
    """
    if not isinstance(value, Mapping):
        raise QueryParseError(f"expected a query object, got {type(value).__name__}")
    if value and all(_is_array(sub) for sub in value.values()):
        op_name, sub_queries = _single_entry(value, "a logical operator")
        operator = _LOGICAL.get(op_name)
        if operator is None:
            raise QueryParseError(f"unknown logical operator: {op_name}")
        return QueryLogicNode(operator, tuple(query_from_json(sub) for sub in sub_queries))
    if all(isinstance(sub, Mapping) for sub in value.values()):
        path, raw = _single_entry(value, "a field condition")
        return FieldQueryNode(parse_field_path(path), field_node_from_json(raw))
    raise QueryParseError("query object is neither a logical operator nor a field condition")


def field_node_from_json(op_map: Any) -> FieldNode:
    """Parse the operator object of a field condition, e.g. ``{"$gt": 18}``."""
    op_name, value = _single_entry(op_map, "a field operator")
    operator = _LOGICAL.get(op_name)
    if operator is not None:
        if not _is_array(value):
            raise QueryParseError(f"expected an array for {op_name}")
        children = []
        for sub in value:
            if not isinstance(sub, Mapping):
                raise QueryParseError("expected an object in logical sub-condition array")
            children.append(field_node_from_json(sub))
        return FieldLogic(operator).with_nodes(children)
    build = _COMPARISONS.get(op_name)
    if build is None:
        raise QueryParseError(f"unknown field operator: {op_name}")
    return build(value)