"""PostgreSQL ticket registry over ``secure_tickets``.

Rows are written by ticket issuance and door scanning. Lookup is by
``ticket_number``, the value issued tokens carry in their ``tid`` claim.

Columns used here:
    ticket_number TEXT UNIQUE, event_id TEXT, current_owner_id TEXT,
    original_owner_id TEXT, status TEXT, is_revoked BOOLEAN, nonce TEXT,
    ticket_token TEXT
"""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resale_gate.domain.models.issued_ticket import IssuedTicketRecord
from resale_gate.domain.models.ticket_lifecycle import (
    TicketLifecycleRecord,
    TicketLifecycleState,
)
from resale_gate.infrastructure.adapters.persistence.listing_store import (
    is_unique_violation,
)
from resale_gate.infrastructure.observability.logging import get_logger_for_component

logger = get_logger_for_component(__name__, component="persistence")


class PostgresTicketRegistry:
    """TicketIssuanceRegistryProtocol over the ``secure_tickets`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def lookup(self, reference: str) -> TicketLifecycleRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT ticket_number, status, is_revoked
                    FROM secure_tickets
                    WHERE ticket_number = :reference
                    LIMIT 1
                """),
                {"reference": reference},
            )
            row = result.mappings().first()

        if row is None:
            return None
        return TicketLifecycleRecord(
            reference=str(row["ticket_number"]),
            status=row["status"] or TicketLifecycleState.ACTIVE.value,
            is_revoked=bool(row["is_revoked"]),
        )

    async def record_issued(self, ticket: IssuedTicketRecord) -> TicketLifecycleRecord:
        """Insert an ACTIVE ``secure_tickets`` row for ``ticket``.

        Raises:
            ValueError: Unique violation on ``ticket_number``.
            IntegrityError: Any other constraint violation.
        """
        async with self._session_factory() as session:
            try:
                await session.execute(
                    text("""
                        INSERT INTO secure_tickets (
                            ticket_number, event_id, current_owner_id,
                            original_owner_id, status, is_revoked, nonce,
                            ticket_token
                        )
                        VALUES (
                            :ticket_number, :event_id, :holder_id, :holder_id,
                            :status, FALSE, :nonce, :proof
                        )
                    """),
                    {
                        "ticket_number": ticket.ticket_number,
                        "event_id": ticket.event_id,
                        "holder_id": ticket.holder_id,
                        "status": ticket.status,
                        "nonce": ticket.nonce,
                        "proof": ticket.proof,
                    },
                )
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                if is_unique_violation(exc):
                    logger.info(
                        "ticket_number_already_registered",
                        ticket_number=ticket.ticket_number,
                    )
                    raise ValueError(
                        f"Ticket {ticket.ticket_number} is already registered"
                    ) from exc
                raise

        logger.info("ticket_registered", ticket_number=ticket.ticket_number)
        return TicketLifecycleRecord(
            reference=ticket.ticket_number, status=ticket.status, is_revoked=False
        )
