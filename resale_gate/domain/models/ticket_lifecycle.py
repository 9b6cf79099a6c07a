"""Ticket lifecycle domain model.

Lifecycle state is owned and written exclusively by the ticket issuance and
scanning subsystem. The admission engine only reads it.

Write contract of the owning subsystem (assumed, not enforced here):
    ACTIVE -> USED     (scanned at the door)
    ACTIVE -> REVOKED  (cancelled / refunded by the organizer)
    ACTIVE -> EXPIRED  (validity window elapsed)
    Transitions are monotonic and never reversed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TicketLifecycleState(Enum):
    """Authoritative lifecycle state of an issued ticket.

    States:
        ACTIVE: Issued and still valid for entry.
        USED: Scanned at the event.
        REVOKED: Cancelled by the organizer.
        EXPIRED: No longer valid.
        UNKNOWN: No authoritative record found. Distinct from ACTIVE.
    """

    ACTIVE = "ACTIVE"
    USED = "USED"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"
    UNKNOWN = "UNKNOWN"

    def permits_resale(self) -> bool:
        """Only ACTIVE tickets may be resold."""
        return self is TicketLifecycleState.ACTIVE

    def valid_transitions(self) -> frozenset[TicketLifecycleState]:
        """Get valid transitions from this state.

        Returns:
            Frozenset of reachable states. Empty for final states.
        """
        return LIFECYCLE_TRANSITION_MATRIX.get(self, frozenset())

    @classmethod
    def from_status(cls, status: str | None) -> TicketLifecycleState:
        """Map a stored status string to a lifecycle state.

        The registry only flags final states, so missing or unrecognised
        values resolve to ACTIVE. The revocation flag is checked separately.
        """
        if status is None:
            return cls.ACTIVE
        try:
            return cls(status.strip().upper())
        except ValueError:
            return cls.ACTIVE


LIFECYCLE_TRANSITION_MATRIX: dict[TicketLifecycleState, frozenset[TicketLifecycleState]] = {
    TicketLifecycleState.ACTIVE: frozenset(
        {
            TicketLifecycleState.USED,
            TicketLifecycleState.REVOKED,
            TicketLifecycleState.EXPIRED,
        }
    ),
    TicketLifecycleState.USED: frozenset(),
    TicketLifecycleState.REVOKED: frozenset(),
    TicketLifecycleState.EXPIRED: frozenset(),
    TicketLifecycleState.UNKNOWN: frozenset(),
}


@dataclass(frozen=True)
class TicketLifecycleRecord:
    """Lifecycle fields of one issued ticket as stored by the registry.

    Attributes:
        reference: Ticket number the signed token refers to.
        status: Raw status string from the registry.
        is_revoked: Revocation flag, checked independently of status.
    """

    reference: str
    status: str = TicketLifecycleState.ACTIVE.value
    is_revoked: bool = False

    @property
    def state(self) -> TicketLifecycleState:
        """Resolved lifecycle state. Revocation flag wins over status."""
        if self.is_revoked:
            return TicketLifecycleState.REVOKED
        return TicketLifecycleState.from_status(self.status)
