"""Adapters between transports and file-like writers."""

from __future__ import annotations

import io
import sys
import threading
from contextlib import suppress
from typing import Any, Callable, Generic, Iterable, Union

from logtransport.transport import L, Transport, TransportError


class TransportWriter(Generic[L]):
    """A file-like writer that turns each written line into a log entry.

    Text or bytes may be written.  Every complete line, with its trailing
    ``\\r`` and ``\\n`` characters removed, is converted by ``from_string`` and
    logged to the transport.  A partial line waits in a buffer until
    :meth:`flush` logs it as it stands.
    """

    def __init__(
        self,
        transport: Transport[L],
        from_string: Callable[[str], L] = str,
    ) -> None:
        self.transport = transport
        self._from_string = from_string
        self._buffer = bytearray()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return not self._closed

    def _emit(self, raw: bytes, strip: bool) -> None:
        text = raw.decode("utf-8", errors="replace")
        if strip:
            text = text.rstrip("\r\n")
        self.transport.log(self._from_string(text))

    def write(self, data: Union[bytes, bytearray, str]) -> int:
        """Buffer ``data``, log every completed line and return its length."""
        if self._closed:
            raise ValueError("write to closed TransportWriter")
        chunk = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        with self._lock:
            self._buffer.extend(chunk)
            while (pos := self._buffer.find(b"\n")) != -1:
                line = bytes(self._buffer[: pos + 1])
                del self._buffer[: pos + 1]
                self._emit(line, strip=True)
        return len(data)

    def flush(self) -> None:
        """Log any partial line, then flush the transport.

        A :class:`TransportError` from the transport is raised as ``OSError``.
        """
        with self._lock:
            if self._buffer:
                leftover = bytes(self._buffer)
                self._buffer.clear()
                self._emit(leftover, strip=False)
        try:
            self.transport.flush()
        except TransportError as exc:
            raise OSError(str(exc)) from exc

    def close(self) -> None:
        """Flush and stop accepting writes; safe to repeat."""
        if self._closed:
            return
        try:
            self.flush()
        finally:
            self._closed = True

    def __enter__(self) -> TransportWriter[L]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_closed", True):
            return
        with suppress(Exception):
            self.close()


class WriterTransport(Transport[L]):
    """A transport that writes each entry's ``str()`` as a line to a writer.

    The writer may be a text stream or a binary one; lines are encoded as
    UTF-8 for the latter.  Writes are serialised by a lock.
    """

    def __init__(self, writer: Any) -> None:
        self.writer = writer
        self._lock = threading.Lock()
        self._closed = False

    def _write_line(self, info: L) -> None:
        line = f"{info}\n"
        if isinstance(self.writer, io.TextIOBase):
            self.writer.write(line)
            return
        if isinstance(self.writer, (io.RawIOBase, io.BufferedIOBase)):
            self.writer.write(line.encode("utf-8"))
            return
        try:
            self.writer.write(line)
        except TypeError:
            self.writer.write(line.encode("utf-8"))

    def log(self, info: L) -> None:
        """Write one entry; write errors are ignored."""
        with self._lock:
            with suppress(Exception):
                self._write_line(info)

    def log_batch(self, infos: Iterable[L]) -> None:
        """Write several entries under one lock, reporting failures on stderr."""
        entries = list(infos)
        if not entries:
            return
        with self._lock:
            for info in entries:
                try:
                    self._write_line(info)
                except Exception as exc:
                    print(
                        f"Failed to write log entry in batch to WriterTransport: {exc}",
                        file=sys.stderr,
                    )

    def flush(self) -> None:
        """Flush the writer, raising :class:`TransportError` on failure."""
        with self._lock:
            flush = getattr(self.writer, "flush", None)
            if flush is None:
                return
            try:
                flush()
            except Exception as exc:
                raise TransportError(f"Failed to flush: {exc}") from exc

    def close(self) -> None:
        """Flush the writer, ignoring errors; the writer itself stays open."""
        if self._closed:
            return
        self._closed = True
        with suppress(Exception):
            self.flush()

    def __enter__(self) -> WriterTransport[L]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_closed", True):
            return
        with suppress(Exception):
            self.close()