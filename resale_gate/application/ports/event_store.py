"""Event store port.

Events are owned by the organizer side of the platform. The admission engine
only reads them to check that a listing targets an active, future event and
to obtain the base price for the price cap.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from resale_gate.domain.models.event import EventRecord


@runtime_checkable
class EventStoreProtocol(Protocol):
    """Read-only access to events.

    Usage:
        event = await event_store.get(event_id)
        if event is None:
            raise InvalidFormatError("Event not found")
    """

    async def get(self, event_id: str) -> EventRecord | None:
        """Fetch an event by id.

        Args:
            event_id: Event identifier as submitted by the seller.

        Returns:
            The event, or None when no such event exists.
        """
        ...
