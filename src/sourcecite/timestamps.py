"""Publish-timestamp parsing for search results and verification references.

Search providers report publish times in several shapes: ISO-8601, SerpAPI's
``MM/DD/YYYY, HH:MM AM, +0000 UTC`` and relative strings such as
``"3 hours ago"``. Everything is normalized to timezone-aware UTC datetimes.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

MAX_FUTURE_DRIFT = timedelta(minutes=10)

_RELATIVE_RE = re.compile(
    r"^(?P<amount>\d+|an?|one)\s*(?P<unit>[a-z]+)\s+ago$",
    re.IGNORECASE,
)

_ABSOLUTE_FORMATS = (
    "%m/%d/%Y, %I:%M %p, %z UTC",
    "%m/%d/%Y, %I:%M %p",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%Y-%m-%d",
)


def _unit_delta(unit: str) -> timedelta | None:
    unit = unit.lower()
    if unit == "s" or unit.startswith("sec"):
        return timedelta(seconds=1)
    if unit == "m" or unit.startswith("min"):
        return timedelta(minutes=1)
    if unit.startswith("mo"):
        return timedelta(days=30)
    if unit.startswith("h"):
        return timedelta(hours=1)
    if unit.startswith("d"):
        return timedelta(days=1)
    if unit.startswith("w"):
        return timedelta(weeks=1)
    if unit.startswith("y"):
        return timedelta(days=365)
    return None


def parse_relative_timestamp(value: str, *, now: datetime) -> datetime | None:
    """Parse strings like ``"5 mins ago"``, ``"an hour ago"`` or ``"yesterday"``."""
    text = " ".join(value.strip().lower().split())
    if text in ("just now", "now"):
        return now
    if text == "yesterday":
        return now - timedelta(days=1)

    match = _RELATIVE_RE.match(text)
    if not match:
        return None
    delta = _unit_delta(match.group("unit"))
    if delta is None:
        return None
    amount_text = match.group("amount")
    amount = int(amount_text) if amount_text.isdigit() else 1
    return now - amount * delta


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_published_timestamp(value: str | None, *, now: datetime | None = None) -> datetime | None:
    """Parse a provider publish timestamp into an aware UTC datetime.

    Args:
        value: Raw timestamp string as reported upstream.
        now: Reference "now" for relative strings (defaults to the current time).

    Returns:
        The parsed instant, or None if the value is empty or unrecognized.
    """
    if not value or not value.strip():
        return None
    text = value.strip()

    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in _ABSOLUTE_FORMATS:
        try:
            return as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    reference = as_utc(now) if now is not None else datetime.now(tz=UTC)
    return parse_relative_timestamp(text, now=reference)


def to_iso(value: datetime) -> str:
    """Format an instant as ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_published_at(value: str | None, *, now: datetime | None = None) -> str | None:
    """Return ``value`` as ISO-8601 UTC, or None if it cannot be parsed."""
    parsed = parse_published_timestamp(value, now=now)
    if parsed is None:
        return None
    return to_iso(parsed)


def is_within_window(value: datetime, window: timedelta, *, now: datetime) -> bool:
    """Whether ``value`` is no older than ``window`` and not beyond the future drift guard."""
    now = as_utc(now)
    return now - window <= value <= now + MAX_FUTURE_DRIFT
