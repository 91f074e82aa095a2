"""Clock helpers used wherever wall-clock time feeds a decision."""

from __future__ import annotations

import datetime as dt
import typing as typ


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


class Clock(typ.Protocol):
    """Callable returning the current aware UTC time."""

    def __call__(self) -> dt.datetime: ...


def parse_github_datetime(value: object) -> dt.datetime | None:
    """Parse a GitHub ISO-8601 timestamp, returning ``None`` when unusable.

    GitHub emits ``2024-05-01T12:00:00Z``; naive values are assumed UTC.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = dt.datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)
