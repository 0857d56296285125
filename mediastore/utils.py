"""Utility helpers for the mediastore system."""

import traceback
import uuid
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Current time in UTC, truncated to milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def from_epoch_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=millis)


def to_epoch_millis(value: datetime) -> int:
    """Convert a datetime to epoch milliseconds; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)


def format_utc(millis: int, pattern: str) -> str:
    """Format epoch milliseconds in UTC using a strftime pattern."""
    return from_epoch_millis(millis).strftime(pattern)


def new_id() -> str:
    """Generate a new 36 character record identifier."""
    return str(uuid.uuid4())


def serialize_exception(ex: BaseException) -> str:
    """Render an exception and its chained causes as traceback text."""
    return "".join(traceback.format_exception(type(ex), ex, ex.__traceback__))
