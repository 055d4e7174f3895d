"""
Core services for the application.

This package contains the record-kind catalog, field coercion, record
validation, the unified timeline, the per-day analytics series and the care
rules that derive alerts and tasks from new records.
"""

from carelog.observability import configure_logging

configure_logging()

from .schema_registry import (  # noqa: E402
    UnknownRecordKindError,
    all_kinds,
    list_by_category,
    lookup,
)
from .timeline import aggregate, filter_events  # noqa: E402
from .validator import RecordValidationError, Result, compose_timestamp, validate  # noqa: E402

__all__ = [
    "Result",
    "RecordValidationError",
    "UnknownRecordKindError",
    "aggregate",
    "all_kinds",
    "compose_timestamp",
    "filter_events",
    "list_by_category",
    "lookup",
    "validate",
]
