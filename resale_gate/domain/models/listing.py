"""Marketplace listing domain model.

A listing is the resalable unit created by the admission engine. It is later
moved through its lifecycle by the purchase flow.

State Machine:
    available -> reserved (buyer started checkout)
    available -> removed  (seller withdrew the listing; record deleted)
    reserved  -> sold     (payment settled)
    reserved  -> available (checkout abandoned, reservation released)

    sold is final. "removed" is not a stored status: removal deletes the
    record and frees its fingerprint.

Invariant:
    For a given fingerprint at most one stored listing exists. Transitions
    change status in place and never create a second record.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID


class ListingStatus(Enum):
    """Status of a stored listing."""

    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"

    def is_terminal(self) -> bool:
        """Check if no further transitions are allowed."""
        return self in TERMINAL_LISTING_STATUSES

    def valid_transitions(self) -> frozenset[ListingStatus]:
        """Get valid status transitions from this status."""
        return LISTING_TRANSITION_MATRIX.get(self, frozenset())

    def is_removable(self) -> bool:
        """Only listings nobody is buying can be withdrawn."""
        return self is ListingStatus.AVAILABLE


TERMINAL_LISTING_STATUSES: frozenset[ListingStatus] = frozenset({ListingStatus.SOLD})

LISTING_TRANSITION_MATRIX: dict[ListingStatus, frozenset[ListingStatus]] = {
    ListingStatus.AVAILABLE: frozenset({ListingStatus.RESERVED}),
    ListingStatus.RESERVED: frozenset({ListingStatus.SOLD, ListingStatus.AVAILABLE}),
    ListingStatus.SOLD: frozenset(),
}


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class ListingRecord:
    """A ticket listed for resale.

    Attributes:
        id: Listing identifier.
        event_id: Event the ticket is for.
        seller_id: Authenticated seller (never taken from the request body).
        original_price: Event base price at listing time (0 when unknown).
        selling_price: Asking price.
        quantity: Number of tickets covered by this proof.
        notes: Sanitized free-text notes, None when empty.
        status: Current listing status.
        fingerprint: SHA-256 hex of the trimmed ticket proof. Never exposed.
        cryptographically_verified: True only when a signature check passed.
        created_at: Creation time (UTC).
        updated_at: Last modification time (UTC).
    """

    id: UUID
    event_id: str
    seller_id: UUID
    original_price: float
    selling_price: float
    quantity: int
    notes: str | None
    fingerprint: str
    status: ListingStatus = ListingStatus.AVAILABLE
    cryptographically_verified: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        now = _utc_now()
        if self.created_at is None:
            object.__setattr__(self, "created_at", now)
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)

    def with_status(self, status: ListingStatus, at: datetime | None = None) -> ListingRecord:
        """Return a copy in ``status`` with a refreshed ``updated_at``."""
        return replace(self, status=status, updated_at=at or _utc_now())

    def to_public_dict(self) -> dict[str, Any]:
        """Public projection for API consumers. The fingerprint is omitted."""
        return {
            "id": str(self.id),
            "eventId": self.event_id,
            "sellerId": str(self.seller_id),
            "originalPrice": self.original_price,
            "sellingPrice": self.selling_price,
            "quantity": self.quantity,
            "notes": self.notes,
            "status": self.status.value,
            "cryptographicallyVerified": self.cryptographically_verified,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
