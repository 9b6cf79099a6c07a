"""In-memory event store for tests and local development."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from resale_gate.domain.models.event import EventRecord


class EventStoreStub:
    """In-memory implementation of EventStoreProtocol.

    Events are keyed by id. ``get_call_count`` lets tests assert that a
    rejected submission never reached the event store.
    """

    def __init__(self, events: list[EventRecord] | None = None) -> None:
        self._events: dict[str, EventRecord] = {}
        self.get_call_count = 0
        for event in events or []:
            self.add_event(event)

    async def get(self, event_id: str) -> EventRecord | None:
        """Fetch an event by id."""
        self.get_call_count += 1
        return self._events.get(event_id)

    # Test helper methods

    def add_event(self, event: EventRecord) -> None:
        """Add or replace an event."""
        self._events[event.id] = event

    def add_upcoming_event(
        self,
        event_id: str,
        base_price: float | None = None,
        days_ahead: int = 7,
        now: datetime | None = None,
    ) -> EventRecord:
        """Add an active event ``days_ahead`` days after ``now``."""
        reference = now or datetime.now(timezone.utc)
        event = EventRecord(
            id=event_id,
            is_active=True,
            date=reference + timedelta(days=days_ahead),
            base_price=base_price,
        )
        self.add_event(event)
        return event

    def clear(self) -> None:
        self._events.clear()
        self.get_call_count = 0
