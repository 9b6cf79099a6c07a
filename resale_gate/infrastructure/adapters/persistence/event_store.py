"""PostgreSQL event store (read-only view of the ``events`` table)."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resale_gate.domain.models.event import EventRecord


class PostgresEventStore:
    """EventStoreProtocol over the organizer-owned ``events`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, event_id: str) -> EventRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT id, is_active, date, base_price, title
                    FROM events
                    WHERE id = :event_id
                """),
                {"event_id": event_id},
            )
            row = result.mappings().first()

        if row is None:
            return None
        return EventRecord(
            id=str(row["id"]),
            is_active=bool(row["is_active"]),
            date=row["date"],
            base_price=float(row["base_price"]) if row["base_price"] is not None else None,
            title=row["title"],
        )
