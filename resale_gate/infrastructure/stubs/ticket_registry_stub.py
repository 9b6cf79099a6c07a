"""In-memory ticket registry for tests and local development."""

from __future__ import annotations

from resale_gate.domain.models.issued_ticket import IssuedTicketRecord
from resale_gate.domain.models.ticket_lifecycle import (
    TicketLifecycleRecord,
    TicketLifecycleState,
)


class TicketRegistryStub:
    """In-memory implementation of TicketIssuanceRegistryProtocol.

    Lifecycle changes made through ``mark`` follow the registry's write
    contract (ACTIVE to USED, REVOKED or EXPIRED, never back), so tests
    cannot build a state the real issuance subsystem would never produce.
    """

    def __init__(self) -> None:
        self._records: dict[str, TicketLifecycleRecord] = {}
        self.lookup_call_count = 0

    async def lookup(self, reference: str) -> TicketLifecycleRecord | None:
        """Fetch the lifecycle record for ``reference``."""
        self.lookup_call_count += 1
        return self._records.get(reference)

    async def record_issued(self, ticket: IssuedTicketRecord) -> TicketLifecycleRecord:
        """Register a newly issued ticket as ACTIVE.

        Raises:
            ValueError: The ticket number is already registered.
        """
        if ticket.ticket_number in self._records:
            raise ValueError(f"Ticket {ticket.ticket_number} is already registered")
        return self.register(ticket.ticket_number, status=ticket.status)

    # Test helper methods

    def register(
        self,
        reference: str,
        status: str = TicketLifecycleState.ACTIVE.value,
        is_revoked: bool = False,
    ) -> TicketLifecycleRecord:
        """Store a record as-is, bypassing transition checks."""
        record = TicketLifecycleRecord(
            reference=reference, status=status, is_revoked=is_revoked
        )
        self._records[reference] = record
        return record

    def mark(self, reference: str, state: TicketLifecycleState) -> TicketLifecycleRecord:
        """Move an existing ticket to ``state``.

        Raises:
            KeyError: Unknown reference.
            ValueError: Transition not allowed by the write contract.
        """
        current = self._records[reference]
        if state not in current.state.valid_transitions():
            raise ValueError(
                f"Ticket {reference} cannot move from {current.state.value} "
                f"to {state.value}"
            )
        record = TicketLifecycleRecord(
            reference=reference,
            status=state.value,
            is_revoked=state is TicketLifecycleState.REVOKED,
        )
        self._records[reference] = record
        return record

    def clear(self) -> None:
        self._records.clear()
        self.lookup_call_count = 0
