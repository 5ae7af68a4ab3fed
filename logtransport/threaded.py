"""A transport wrapper that does all its work on a background thread."""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Future
from contextlib import suppress
from dataclasses import dataclass
from typing import Any, Callable, Optional

from logtransport.transport import L, Transport, TransportError


@dataclass(frozen=True)
class _Entry:
    info: Any


@dataclass(frozen=True)
class _Call:
    action: Callable[[Transport], Any]
    future: Future


class _Shutdown:
    pass


_SHUTDOWN = _Shutdown()


def _run(transport: Transport, inbox: "queue.SimpleQueue[Any]") -> None:
    while True:
        message = inbox.get()
        if message is _SHUTDOWN:
            with suppress(Exception):
                transport.flush()
            return
        if isinstance(message, _Call):
            try:
                result = message.action(transport)
            except BaseException as exc:  # handed back to the waiting caller
                message.future.set_exception(exc)
            else:
                message.future.set_result(result)
        else:
            with suppress(Exception):
                transport.log(message.info)


class ThreadedTransport(Transport[L]):
    """Wraps a transport so that logging never blocks the caller.

    Entries are handed to a background thread in order; :meth:`flush` and
    :meth:`query` wait for the thread to reach them and return its result.
    Closing (by :meth:`shutdown`, a ``with`` block or garbage collection)
    flushes the wrapped transport and stops the thread.
    """

    def __init__(self, transport: Transport[L], thread_name: Optional[str] = None) -> None:
        self._inbox: "queue.SimpleQueue[Any]" = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(
            target=_run, args=(transport, self._inbox), name=thread_name, daemon=True
        )
        self._thread.start()

    @property
    def thread_name(self) -> str:
        return self._thread.name

    @property
    def closed(self) -> bool:
        return self._closed

    def _send(self, message: Any) -> bool:
        with self._lock:
            if self._closed:
                return False
            self._inbox.put(message)
            return True

    def _call(self, action: Callable[[Transport], Any], what: str) -> Any:
        future: Future = Future()
        if not self._send(_Call(action, future)):
            raise TransportError(f"failed to send {what} message to background thread")
        return future.result()

    def log(self, info: L) -> None:
        """Queue an entry; silently dropped once the transport is shut down."""
        self._send(_Entry(info))

    def flush(self) -> None:
        """Wait until every queued entry is written and the wrapped transport flushed."""
        self._call(lambda transport: transport.flush(), "flush")

    def query(self, options: Any) -> list[L]:
        """Run the query on the background thread and return its result."""
        return self._call(lambda transport: transport.query(options), "query")

    def shutdown(self) -> None:
        """Flush pending entries and stop the background thread; safe to repeat."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._inbox.put(_SHUTDOWN)
        if threading.current_thread() is not self._thread:
            self._thread.join()

    def __enter__(self) -> ThreadedTransport[L]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    def __del__(self) -> None:
        if getattr(self, "_thread", None) is None:
            return
        with suppress(Exception):
            self.shutdown()


def into_threaded(
    transport: Transport[L], thread_name: Optional[str] = None
) -> ThreadedTransport[L]:
    """Wrap ``transport`` in a :class:`ThreadedTransport`."""
    return ThreadedTransport(transport, thread_name)