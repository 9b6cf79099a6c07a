"""Issued ticket record.

Written to the ticket registry when an organizer mints a ticket, so a
verified token's ``tid`` claim resolves to an ACTIVE lifecycle record at
listing time.
"""

from __future__ import annotations

from dataclasses import dataclass

from resale_gate.domain.models.ticket_lifecycle import TicketLifecycleState


@dataclass(frozen=True)
class IssuedTicketRecord:
    """Registry row for a newly issued ticket.

    Attributes:
        ticket_number: Registry key, carried in the ``tid`` claim.
        event_id: Event the ticket admits to.
        holder_id: Original and current holder.
        proof: The QR proof text handed to the holder.
        nonce: Per-issue nonce, None for structured proofs.
    """

    ticket_number: str
    event_id: str
    holder_id: str
    proof: str
    nonce: str | None = None

    @property
    def status(self) -> str:
        # Issued tickets always start ACTIVE
        return TicketLifecycleState.ACTIVE.value
