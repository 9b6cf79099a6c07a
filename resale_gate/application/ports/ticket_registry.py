"""Ticket registry ports.

The registry holds the authoritative lifecycle state of every issued ticket.
Admission only reads it, and only for references extracted from a token
whose signature verified. Issuance writes a new ACTIVE row per ticket.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from resale_gate.domain.models.issued_ticket import IssuedTicketRecord
from resale_gate.domain.models.ticket_lifecycle import TicketLifecycleRecord


@runtime_checkable
class TicketRegistryProtocol(Protocol):
    """Read-only lifecycle lookup by ticket reference."""

    async def lookup(self, reference: str) -> TicketLifecycleRecord | None:
        """Fetch the lifecycle record for a ticket.

        Args:
            reference: Ticket number taken from verified token claims.

        Returns:
            The record, or None when the registry has no such ticket.
        """
        ...


@runtime_checkable
class TicketIssuanceRegistryProtocol(TicketRegistryProtocol, Protocol):
    """Registry that also accepts newly issued tickets."""

    async def record_issued(self, ticket: IssuedTicketRecord) -> TicketLifecycleRecord:
        """Store an issued ticket as ACTIVE.

        Args:
            ticket: The ticket just minted.

        Returns:
            The lifecycle record now held for ``ticket.ticket_number``.

        Raises:
            ValueError: The ticket number is already registered.
        """
        ...
