# logtransport

Building blocks for delivering structured log records and for filtering
JSON-like records (`dict`, `list` and scalars) with a small query language.

The package has no runtime dependencies.

## Modules

- `logtransport.transport`: `Transport` is the abstract base for log sinks.
  A subclass implements `log(info)`. `log_batch(logs)`, `flush()` and
  `query(options)` have defaults: `log_batch` logs each entry in turn,
  `flush` does nothing, and `query` returns an empty list. Failures are
  raised as `TransportError`.
- `logtransport.threaded`: `ThreadedTransport(transport, thread_name=None)`
  runs the wrapped transport on a background thread.
  - `log` queues the entry and returns at once. Once the wrapper has been
    shut down, entries are dropped.
  - `flush` and `query` wait for the thread to answer. They return its
    result or re-raise its exception.
  - `shutdown` flushes the wrapped transport and stops the thread. Calling
    it again does nothing.
  - Using the wrapper as a context manager shuts it down on exit.
  - `into_threaded(transport, thread_name=None)` is a shorthand for the
    constructor.
- `logtransport.adapters`:
  - `TransportWriter(transport, from_string=str)` is a file-like writer. It
    accepts text or bytes. Each complete line, without its trailing `\r` and
    `\n`, is passed through `from_string` and logged. `flush` logs any
    partial line and then flushes the transport. A `TransportError` from the
    transport is raised as `OSError`. `close` flushes and stops further
    writes.
  - `WriterTransport(writer)` writes `str(entry)` plus a newline to a text
    or binary stream. `log` ignores write errors. `log_batch` reports each
    failed entry on stderr. `flush` raises `TransportError`. `close` flushes
    but leaves the stream open.
- `logtransport.query_value`: `QueryValue` and `ValueKind`. `to_query_value`
  converts these Python values:
  - strings, numbers and booleans;
  - lists and tuples;
  - compiled regular expressions;
  - datetimes, which are normalised to UTC;
  - timedeltas;
  - callables;
  - `None`. Mappings also become `Null`.
- `logtransport.field_path`: `parse_field_path` parses paths such as
  `user.name`, `items[1].price`, `items[*].price` and `user.*`.
  - `FieldPath.extract_refs(value)` returns every value the path reaches.
  - `FieldPath.extract(value)` returns a copy. A single match is returned
    as is. Several matches come back as a list. It raises `LookupError`
    when the path reaches nothing.
- `logtransport.comparator`: the `Comparator` enum, with `compare(value,
  expected)` and `evaluate(values, expected)`. Its operators cover:
  - equality and ordering;
  - existence;
  - regex matching;
  - prefix, suffix and substring tests;
  - `IN` and `NOT_IN`;
  - `HAS_ALL`, `HAS_ANY` and `HAS_NONE`;
  - length and emptiness;
  - ranges;
  - divisibility;
  - RFC 3339 date checks: `BEFORE`, `AFTER` and `SAME_DAY`;
  - a custom predicate.
- `logtransport.comparisons`: `FieldComparison(comparator, value)`, and the
  shorthands `gt`, `lt` and `eq`.
- `logtransport.nodes`: the query tree.
  - `FieldLogic` combines conditions on one value.
  - `FieldQueryNode` applies a condition at a path. It evaluates to false
    when the path reaches nothing.
  - `QueryLogicNode` combines whole queries.
  - The helpers are `and_`, `or_`, `field_query` and `field_logic`.
- `logtransport.json_query`: `query_from_json` and `field_node_from_json`
  build trees from MongoDB-style documents. They accept the logic operators
  `$and` and `$or`, and the field operators `$eq`, `$gt` and `$lt`.
  Malformed documents raise `QueryParseError`.

## Threaded transport

```python
from logtransport.transport import Transport
from logtransport.threaded import ThreadedTransport

class ListTransport(Transport):
    def __init__(self):
        self.records = []

    def log(self, info):
        self.records.append(info)

sink = ListTransport()
with ThreadedTransport(sink, thread_name="log-worker") as threaded:
    threaded.log("first")
    threaded.log("second")
    threaded.flush()          # waits until the worker has handled both
    assert sink.records == ["first", "second"]
```

## Stream adapters

```python
import io
from logtransport.adapters import TransportWriter, WriterTransport

writer = TransportWriter(sink)
writer.write(b"line one\nline two\n")   # two log records
writer.close()

stream = io.StringIO()
out = WriterTransport(stream)
out.log("hello")
out.flush()
assert stream.getvalue() == "hello\n"
```

## Query DSL

A filter can be built in code:

```python
from logtransport.comparisons import gt, lt, eq
from logtransport.nodes import and_, or_, field_query, field_logic

query = and_(
    field_query("user.age", field_logic("and", gt(18), lt(65))),
    or_(
        field_query("user.status", eq("active")),
        field_query("user.role", eq("admin")),
    ),
)
assert query.evaluate({"user": {"age": 30, "status": "inactive", "role": "admin"}})
```

The same kind of filter can be written as JSON:

```python
from logtransport.json_query import query_from_json

query = query_from_json({
    "$and": [
        {"user.age": {"$gt": 25}},
        {"user.status": {"$or": [{"$eq": "active"}, {"$eq": "pending"}]}},
    ]
})
assert query.evaluate({"user": {"age": 30, "status": "active"}})
```

## What it does not do

The package ships no concrete destinations. There are no file, HTTP or
database transports, and records are not stored anywhere by themselves.
`Transport.query` returns nothing unless a subclass implements it. The
package has no query-options type with levels, time ranges or paging. The
query trees evaluate single records, and selecting and sorting stored
entries is left to the transport.

## Running the tests

```
pip install -e ".[test]"
pytest
```