"""Instant parsing and formatting for modification timestamps."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current instant, truncated to whole seconds to match the wire format."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def format_instant(instant: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC."""
    return instant.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_instant(raw: object) -> datetime:
    """Parse an ISO-8601 instant string into an aware UTC datetime.

    Accepts a ``Z`` suffix or a numeric offset, with or without fractional
    seconds.  Values without an offset are not instants and are rejected.

    Raises:
        ValueError: If *raw* is not a string or cannot be parsed as an instant.
    """
    if not isinstance(raw, str):
        raise ValueError(f"Expected an ISO-8601 string, got {type(raw).__name__}")
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {raw!r}")
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"Timestamp is out of range in UTC: {raw!r}") from exc
