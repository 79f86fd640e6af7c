"""Naive-UTC clock used across the engine and the storage layer."""

import datetime


def utcnow() -> datetime.datetime:
    """Current time as a naive UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime.datetime) -> datetime.datetime:
    """Convert an offset-aware datetime to naive UTC.  Naive values are assumed UTC already."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=None)
    return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
