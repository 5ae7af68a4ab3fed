"""Log transports, background delivery, stream adapters and a query DSL for JSON-like log records."""

__version__ = "0.1.0"

__all__ = [
    "adapters",
    "comparator",
    "comparisons",
    "field_path",
    "json_query",
    "nodes",
    "query_value",
    "threaded",
    "transport",
]