"""Dotted paths into JSON-like data, with wildcards and array indexes."""

from __future__ import annotations

import copy
import enum
import re
from dataclasses import dataclass
from typing import Any, Union

_INDEX = re.compile(r"\+?[0-9]+")


class SegmentKind(enum.Enum):
    """The kind of step a path segment takes."""

    FIELD = "field"
    WILDCARD = "wildcard"
    ARRAY_INDEX = "array_index"
    ARRAY_WILDCARD = "array_wildcard"


@dataclass(frozen=True)
class PathSegment:
    """One step of a path: a field name, an index, or a wildcard."""

    kind: SegmentKind
    key: Union[str, int, None] = None

    @classmethod
    def field(cls, name: str) -> PathSegment:
        return cls(SegmentKind.FIELD, name)

    @classmethod
    def index(cls, position: int) -> PathSegment:
        return cls(SegmentKind.ARRAY_INDEX, position)

    @classmethod
    def wildcard(cls) -> PathSegment:
        return cls(SegmentKind.WILDCARD)

    @classmethod
    def array_wildcard(cls) -> PathSegment:
        return cls(SegmentKind.ARRAY_WILDCARD)

    def step(self, current: Any):
        """Yield the values this segment reaches from ``current``."""
        if isinstance(current, dict):
            if self.kind is SegmentKind.FIELD:
                if self.key in current:
                    yield current[self.key]
            elif self.kind is SegmentKind.WILDCARD:
                yield from current.values()
        elif isinstance(current, (list, tuple)):
            if self.kind is SegmentKind.ARRAY_INDEX:
                if self.key < len(current):
                    yield current[self.key]
            elif self.kind is SegmentKind.ARRAY_WILDCARD:
                yield from current


@dataclass(frozen=True)
class FieldPath:
    """A parsed path such as ``user.address.city`` or ``items[*].price``."""

    segments: tuple[PathSegment, ...]

    def extract_refs(self, value: Any) -> list[Any]:
        """Return the values the path reaches, as the objects found in ``value``."""
        current = [value]
        for segment in self.segments:
            current = [found for item in current for found in segment.step(item)]
            if not current:
                return []
        return current

    def extract(self, value: Any) -> Any:
        """Return a copy of what the path reaches.

        A single match is returned as is; several matches come back as a list.
        Raises ``LookupError`` when the path reaches nothing.
        """
        found = self.extract_refs(value)
        if not found:
            raise LookupError(f"path matches nothing: {self!r}")
        if len(found) == 1:
            return copy.deepcopy(found[0])
        return [copy.deepcopy(item) for item in found]


def _parse_bracketed(segment: str) -> list[PathSegment]:
    parts: list[PathSegment] = []
    for part in segment.split("["):
        if not part:
            continue
        if part == "*]":
            parts.append(PathSegment.array_wildcard())
        elif part.endswith("]"):
            digits = part[:-1]
            if _INDEX.fullmatch(digits):
                parts.append(PathSegment.index(int(digits)))
        else:
            parts.append(PathSegment.field(part))
    return parts


def parse_field_path(path: str) -> FieldPath:
    """Parse a dotted path; malformed array indexes are silently dropped."""
    segments: list[PathSegment] = []
    for segment in path.split("."):
        if "[" in segment:
            segments.extend(_parse_bracketed(segment))
        elif segment == "*":
            segments.append(PathSegment.wildcard())
        else:
            segments.append(PathSegment.field(segment))
    return FieldPath(tuple(segments))