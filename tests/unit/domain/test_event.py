"""Unit tests for EventRecord timing."""

from datetime import datetime, timedelta, timezone

from resale_gate.domain.models.event import EventRecord

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_event_yesterday_is_past() -> None:
    event = EventRecord(id="e", is_active=True, date=NOW - timedelta(days=1))
    assert event.is_past(NOW)


def test_event_next_week_is_not_past() -> None:
    event = EventRecord(id="e", is_active=True, date=NOW + timedelta(days=7))
    assert not event.is_past(NOW)


def test_naive_date_is_read_as_utc() -> None:
    event = EventRecord(id="e", is_active=True, date=datetime(2026, 1, 2))
    assert event.starts_at.tzinfo is timezone.utc
    assert not event.is_past(NOW)
