import threading
import time
from dataclasses import dataclass, field
from typing import Optional

import pytest

from logtransport.threaded import ThreadedTransport, into_threaded
from logtransport.transport import Transport, TransportError


@dataclass
class TestLog:
    level: str
    message: str


@dataclass
class EventLog:
    event_type: str
    timestamp: int
    user_id: Optional[int]
    data: dict = field(default_factory=dict)


class MockTransport(Transport):
    def __init__(self, delay=0.0):
        self._messages = []
        self._lock = threading.Lock()
        self.delay = delay
        self.flushes = 0

    def log(self, info):
        if self.delay > 0:
            time.sleep(self.delay)
        with self._lock:
            self._messages.append(info)

    def flush(self):
        if self.delay > 0:
            time.sleep(self.delay)
        self.flushes += 1

    def query(self, options):
        with self._lock:
            return [m for m in self._messages if m.level == options]

    def get_messages(self):
        with self._lock:
            return list(self._messages)


class FailingFlush(MockTransport):
    def flush(self):
        raise TransportError("disk full")


def test_threaded_transport_basic_logging():
    mock = MockTransport()
    threaded = into_threaded(mock)
    threaded.log(TestLog("INFO", "Message 1"))
    threaded.log(TestLog("INFO", "Message 2"))
    threaded.log(TestLog("INFO", "Message 3"))
    threaded.flush()

    messages = mock.get_messages()
    assert len(messages) == 3
    assert [m.message for m in messages] == ["Message 1", "Message 2", "Message 3"]
    threaded.shutdown()


def test_threaded_transport_non_blocking():
    slow = MockTransport(delay=0.1)
    threaded = into_threaded(slow)
    start = time.monotonic()
    threaded.log(TestLog("INFO", "Slow message 1"))
    threaded.log(TestLog("INFO", "Slow message 2"))
    elapsed = time.monotonic() - start
    assert elapsed < 0.05

    threaded.flush()
    assert len(slow.get_messages()) == 2
    threaded.shutdown()


def test_threaded_transport_graceful_shutdown():
    mock = MockTransport()
    threaded = into_threaded(mock, "test-logger")
    assert threaded.thread_name == "test-logger"
    threaded.log(TestLog("INFO", "Before shutdown"))
    threaded.shutdown()

    messages = mock.get_messages()
    assert len(messages) == 1
    assert messages[0].message == "Before shutdown"
    assert mock.flushes == 1


def test_with_custom_event_log():
    mock = MockTransport()
    threaded = into_threaded(mock)
    threaded.log(EventLog("user_login", 1234567890, 42))
    threaded.log(EventLog("page_view", 1234567891, 42))
    threaded.flush()

    messages = mock.get_messages()
    assert len(messages) == 2
    assert messages[0].event_type == "user_login"
    assert messages[0].user_id == 42
    assert messages[1].event_type == "page_view"
    threaded.shutdown()


def test_with_string_logs():
    mock = MockTransport()
    threaded = into_threaded(mock)
    threaded.log("Simple string log 1")
    threaded.log("Simple string log 2")
    threaded.flush()
    assert mock.get_messages() == ["Simple string log 1", "Simple string log 2"]
    threaded.shutdown()


def test_with_dict_logs():
    mock = MockTransport()
    threaded = into_threaded(mock)
    threaded.log({"level": "INFO", "message": "Simple string log 1"})
    threaded.log({"level": "INFO", "message": "Simple string log 2"})
    threaded.flush()
    messages = mock.get_messages()
    assert [m["message"] for m in messages] == ["Simple string log 1", "Simple string log 2"]
    threaded.shutdown()


def test_graceful_shutdown_with_custom_types():
    mock = MockTransport()
    threaded = into_threaded(mock, "event-logger")
    threaded.log(EventLog("app_start", 1234567890, None))
    threaded.log(EventLog("user_action", 1234567891, 123))
    threaded.shutdown()

    messages = mock.get_messages()
    assert len(messages) == 2
    assert messages[0].event_type == "app_start"
    assert messages[1].event_type == "user_action"
    assert messages[1].user_id == 123


def test_drop_behavior_with_block():
    mock = MockTransport()
    with into_threaded(mock) as threaded:
        threaded.log(TestLog("INFO", "Will be flushed on drop"))
    assert threaded.closed
    messages = mock.get_messages()
    assert len(messages) == 1
    assert messages[0].message == "Will be flushed on drop"


def test_drop_behavior_on_delete():
    mock = MockTransport()
    threaded = into_threaded(mock)
    threaded.log(TestLog("INFO", "Will be flushed on drop"))
    del threaded
    time.sleep(0.1)
    messages = mock.get_messages()
    assert [m.message for m in messages] == ["Will be flushed on drop"]


def test_query_runs_on_background_thread():
    mock = MockTransport()
    threaded = ThreadedTransport(mock)
    threaded.log(TestLog("INFO", "a"))
    threaded.log(TestLog("ERROR", "b"))
    threaded.log(TestLog("INFO", "c"))
    result = threaded.query("INFO")
    assert [m.message for m in result] == ["a", "c"]
    threaded.shutdown()


def test_flush_error_propagates():
    threaded = ThreadedTransport(FailingFlush())
    with pytest.raises(TransportError, match="disk full"):
        threaded.flush()
    threaded.shutdown()


def test_flush_after_shutdown_raises():
    threaded = ThreadedTransport(MockTransport())
    threaded.shutdown()
    with pytest.raises(TransportError):
        threaded.flush()


def test_query_after_shutdown_raises():
    threaded = ThreadedTransport(MockTransport())
    threaded.shutdown()
    with pytest.raises(TransportError):
        threaded.query("INFO")


def test_log_after_shutdown_is_dropped():
    mock = MockTransport()
    threaded = ThreadedTransport(mock)
    threaded.log("kept")
    threaded.shutdown()
    threaded.log("dropped")
    time.sleep(0.05)
    assert mock.get_messages() == ["kept"]


def test_shutdown_is_idempotent():
    mock = MockTransport()
    threaded = ThreadedTransport(mock)
    threaded.shutdown()
    threaded.shutdown()
    assert threaded.closed
    assert mock.flushes == 1


def test_log_batch_goes_through_thread():
    mock = MockTransport()
    threaded = ThreadedTransport(mock)
    threaded.log_batch(["x", "y", "z"])
    threaded.flush()
    assert mock.get_messages() == ["x", "y", "z"]
    threaded.shutdown()