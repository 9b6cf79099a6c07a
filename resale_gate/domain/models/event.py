"""Event record as seen by the admission engine (read-only)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class EventRecord:
    """An event tickets can be listed for.

    Attributes:
        id: Event identifier.
        is_active: Whether the organizer still runs the event.
        date: When the event takes place. Naive values are read as UTC.
        base_price: Face value of a ticket, None when unknown.
        title: Display title, informational only.
    """

    id: str
    is_active: bool
    date: datetime
    base_price: float | None = None
    title: str | None = None

    @property
    def starts_at(self) -> datetime:
        """Event date as an aware UTC datetime."""
        if self.date.tzinfo is None:
            return self.date.replace(tzinfo=timezone.utc)
        return self.date

    def is_past(self, now: datetime) -> bool:
        """Whether the event date is earlier than ``now``."""
        return self.starts_at < now
