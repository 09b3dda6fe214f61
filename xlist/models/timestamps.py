"""Timestamp field type shared by stored models."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator


def as_utc(value: datetime) -> datetime:
    """Read a naive datetime as UTC, leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Naive values are taken as UTC, matching the store encoding
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
