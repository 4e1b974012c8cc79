"""Tests for publish timestamp parsing."""

from datetime import UTC, datetime, timedelta

import pytest

from sourcecite.timestamps import (
    MAX_FUTURE_DRIFT,
    is_within_window,
    normalize_published_at,
    parse_published_timestamp,
    parse_relative_timestamp,
    to_iso,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def test_parse_iso_with_z_suffix() -> None:
    assert parse_published_timestamp("2024-05-01T10:30:00Z") == datetime(
        2024, 5, 1, 10, 30, tzinfo=UTC
    )


def test_parse_iso_with_offset_converts_to_utc() -> None:
    parsed = parse_published_timestamp("2024-05-01T12:00:00+02:00")
    assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)


def test_parse_naive_treated_as_utc() -> None:
    parsed = parse_published_timestamp("2024-05-01 08:00:00")
    assert parsed is not None
    assert parsed.tzinfo is UTC
    assert parsed.hour == 8


def test_parse_serpapi_format() -> None:
    parsed = parse_published_timestamp("05/01/2024, 07:15 AM, +0000 UTC")
    assert parsed == datetime(2024, 5, 1, 7, 15, tzinfo=UTC)


def test_parse_month_name_date() -> None:
    assert parse_published_timestamp("Apr 30, 2024") == datetime(2024, 4, 30, tzinfo=UTC)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("3 hours ago", NOW - timedelta(hours=3)),
        ("an hour ago", NOW - timedelta(hours=1)),
        ("15 mins ago", NOW - timedelta(minutes=15)),
        ("2 days ago", NOW - timedelta(days=2)),
        ("1 week ago", NOW - timedelta(weeks=1)),
        ("5m ago", NOW - timedelta(minutes=5)),
        ("2h ago", NOW - timedelta(hours=2)),
        ("30s ago", NOW - timedelta(seconds=30)),
        ("2 months ago", NOW - timedelta(days=60)),
        ("yesterday", NOW - timedelta(days=1)),
        ("just now", NOW),
    ],
)
def test_parse_relative(value: str, expected: datetime) -> None:
    assert parse_published_timestamp(value, now=NOW) == expected


def test_relative_unknown_unit() -> None:
    assert parse_relative_timestamp("3 fortnights ago", now=NOW) is None


@pytest.mark.parametrize("value", [None, "", "   ", "sometime soon", "not-a-date"])
def test_unparseable_returns_none(value: str | None) -> None:
    assert parse_published_timestamp(value, now=NOW) is None


def test_to_iso_millisecond_z() -> None:
    assert to_iso(datetime(2024, 5, 1, 12, 0, tzinfo=UTC)) == "2024-05-01T12:00:00.000Z"


def test_normalize_published_at() -> None:
    assert normalize_published_at("2 hours ago", now=NOW) == "2024-05-01T10:00:00.000Z"
    assert normalize_published_at("garbage", now=NOW) is None


class TestIsWithinWindow:
    def test_inside(self) -> None:
        assert is_within_window(NOW - timedelta(hours=2), timedelta(hours=6), now=NOW)

    def test_too_old(self) -> None:
        assert not is_within_window(NOW - timedelta(days=2), timedelta(hours=6), now=NOW)

    def test_small_future_drift_allowed(self) -> None:
        assert is_within_window(NOW + timedelta(minutes=5), timedelta(hours=6), now=NOW)

    def test_far_future_rejected(self) -> None:
        future = NOW + MAX_FUTURE_DRIFT + timedelta(seconds=1)
        assert not is_within_window(future, timedelta(hours=6), now=NOW)
