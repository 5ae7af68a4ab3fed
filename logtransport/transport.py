"""The interface every log transport implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, TypeVar

L = TypeVar("L")


class TransportError(Exception):
    """A transport failed to flush, query or reach its backend."""


class Transport(ABC, Generic[L]):
    """A destination for log entries of any type ``L``.

    Only :meth:`log` must be provided; the other operations have defaults.
    """

    @abstractmethod
    def log(self, info: L) -> None:
        """Record one log entry."""

    def log_batch(self, logs: Iterable[L]) -> None:
        """Record several entries, in order."""
        for info in logs:
            self.log(info)

    def flush(self) -> None:
        """Push out anything buffered. Raises :class:`TransportError` on failure."""
        return None

    def query(self, options: Any) -> list[L]:
        """Return the stored entries that ``options`` selects; none by default."""
        return []