# src/inventory_relay/db/time.py
"""Time utilities for stored documents."""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def to_iso(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with a ``Z`` suffix.

    Sub-second precision is truncated to milliseconds and omitted entirely
    when zero, so ``2024-03-31T00:00:00Z`` round-trips unchanged.
    """
    value = value.astimezone(UTC)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    millis = value.microsecond // 1000
    if millis:
        text += f".{millis:03d}"
    return text + "Z"


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Naive timestamps are interpreted as UTC.

    Raises:
        ValueError: If the string is not a valid ISO-8601 timestamp.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def epoch_millis(value: datetime) -> int:
    """Return milliseconds since the Unix epoch."""
    return int(value.timestamp() * 1000)


def from_epoch_millis(millis: int) -> datetime:
    """Return an aware UTC datetime for a millisecond epoch value."""
    return datetime.fromtimestamp(millis / 1000, UTC)


def seconds_until(target: datetime, now: datetime) -> int:
    """Return whole seconds from ``now`` until ``target`` (may be negative)."""
    return math.floor((target - now).total_seconds())
