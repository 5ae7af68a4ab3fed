import pytest

from logtransport.transport import Transport, TransportError


class ListTransport(Transport):
    def __init__(self):
        self.entries = []

    def log(self, info):
        self.entries.append(info)


class RejectingTransport(Transport):
    def __init__(self, reject):
        self.reject = reject
        self.entries = []

    def log(self, info):
        if info == self.reject:
            raise TransportError(f"rejected {info}")
        self.entries.append(info)


def test_transport_requires_log():
    with pytest.raises(TypeError):
        Transport()


def test_single_entry_batch_records_entry():
    transport = ListTransport()
    Transport.log_batch(transport, ["first"])
    assert transport.entries == ["first"]


def test_log_batch_logs_each_in_order():
    transport = ListTransport()
    Transport.log_batch(transport, ["a", "b", "c"])
    assert transport.entries == ["a", "b", "c"]


def test_log_batch_accepts_generator():
    transport = ListTransport()
    Transport.log_batch(transport, (n for n in range(3)))
    assert transport.entries == [0, 1, 2]


def test_log_batch_empty_logs_nothing():
    transport = ListTransport()
    Transport.log_batch(transport, [])
    assert transport.entries == []


def test_default_flush_returns_none():
    transport = ListTransport()
    Transport.log_batch(transport, ["x"])
    assert Transport.flush(transport) is None
    assert transport.entries == ["x"]


def test_default_query_returns_empty_list():
    transport = ListTransport()
    Transport.log_batch(transport, ["x"])
    assert Transport.query(transport, {"limit": 10}) == []


def test_log_batch_propagates_transport_error():
    transport = RejectingTransport(reject="bad")
    with pytest.raises(TransportError, match="rejected bad"):
        Transport.log_batch(transport, ["ok", "bad", "later"])
    assert transport.entries == ["ok"]