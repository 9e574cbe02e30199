"""Timestamp extraction shared by the aggregations."""

from datetime import datetime
from typing import Iterable, Iterator, Tuple, TypeVar

import structlog

from app.core.clock import to_utc
from app.core.exceptions import MalformedRecordError

logger = structlog.get_logger()

R = TypeVar("R")


def with_timestamps(records: Iterable[R]) -> Iterator[Tuple[R, datetime]]:
    """Yield (record, utc timestamp) pairs, skipping unparseable timestamps."""
    for record in records:
        try:
            yield record, to_utc(record.created_at)
        except MalformedRecordError as e:
            logger.warning(
                "Skipping malformed record",
                record_type=type(record).__name__,
                record_id=getattr(record, "id", None),
                value=repr(e.value),
            )
