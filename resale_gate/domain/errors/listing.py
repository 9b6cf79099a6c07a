"""Listing store errors.

Raised by listing store implementations (in-memory stub and PostgreSQL
adapter). The admission engine converts DuplicateFingerprintError into the
ALREADY_LISTED outcome; the others surface to the purchase flow.
"""

from __future__ import annotations

from uuid import UUID

from resale_gate.domain.exceptions import ResaleGateError


class ListingStoreError(ResaleGateError):
    """Base error for listing persistence operations."""

    pass


class DuplicateFingerprintError(ListingStoreError):
    """Insert lost against an existing listing with the same fingerprint.

    The storage layer's uniqueness constraint is the authoritative guard
    against two concurrent submissions of the same ticket.

    Attributes:
        fingerprint_hint: Display-safe fingerprint prefix for logs.
    """

    def __init__(self, fingerprint_hint: str) -> None:
        self.fingerprint_hint = fingerprint_hint
        super().__init__(f"Listing with fingerprint {fingerprint_hint} already exists")


class ListingNotFoundError(ListingStoreError):
    """Raised when a listing id does not exist."""

    def __init__(self, listing_id: UUID) -> None:
        self.listing_id = listing_id
        super().__init__(f"Listing not found: {listing_id}")


class InvalidListingTransitionError(ListingStoreError):
    """Raised when a listing status change is not in the transition matrix.

    Attributes:
        listing_id: Listing being transitioned.
        from_status: Current status value.
        to_status: Requested status value (or "removed").
    """

    def __init__(self, listing_id: UUID, from_status: str, to_status: str) -> None:
        self.listing_id = listing_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Listing {listing_id} cannot move from {from_status} to {to_status}"
        )
