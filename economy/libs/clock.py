"""Timestamps for persisted rows

Columns are TIMESTAMP WITHOUT TIME ZONE on both SQLite and PostgreSQL, so
every stored value is a naive datetime holding UTC wall-clock time.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
