"""Error taxonomy for the analytics engine."""

from typing import Any, Optional


class AnalyticsError(Exception):
    """Base error for the analytics engine."""


class StoreQueryError(AnalyticsError):
    """Raised when the record store cannot serve a query."""

    def __init__(self, operation: str, message: str = "record store query failed"):
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class MalformedRecordError(AnalyticsError):
    """Raised when a record carries a timestamp that cannot be parsed.

    Aggregations catch this per record and skip the offending record.
    """

    def __init__(self, value: Any, record_id: Optional[str] = None):
        self.value = value
        self.record_id = record_id
        super().__init__(f"unparseable timestamp: {value!r}")
