"""Listing store port.

The listing store is the only collaborator the admission engine writes to.
It must enforce uniqueness of ``fingerprint`` across stored listings: this
constraint, not the pre-insert lookup, is what guarantees that one ticket
backs at most one listing when two submissions race.

Status transitions (reserve, release, sell) and removal are driven by the
purchase flow and must follow LISTING_TRANSITION_MATRIX.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from resale_gate.domain.models.listing import ListingRecord, ListingStatus


@runtime_checkable
class ListingStoreProtocol(Protocol):
    """Persistence for marketplace listings.

    Implementations:
    - ListingStoreStub: in-memory, for tests and local development.
    - PostgresListingStore: SQLAlchemy async over the ``listings`` table.
    """

    async def find_by_fingerprint(self, fingerprint: str) -> ListingRecord | None:
        """Return the stored listing backed by ``fingerprint``, if any."""
        ...

    async def insert(self, record: ListingRecord) -> ListingRecord:
        """Persist a new listing.

        Args:
            record: Listing to store.

        Returns:
            The stored listing.

        Raises:
            DuplicateFingerprintError: A listing with the same fingerprint
                already exists.
        """
        ...

    async def count_recent_by_seller(self, seller_id: UUID, since: datetime) -> int:
        """Count listings ``seller_id`` created at or after ``since``."""
        ...

    async def get(self, listing_id: UUID) -> ListingRecord | None:
        """Fetch a listing by id."""
        ...

    async def update_status(
        self, listing_id: UUID, status: ListingStatus
    ) -> ListingRecord:
        """Move a listing to ``status``.

        Raises:
            ListingNotFoundError: No listing with ``listing_id``.
            InvalidListingTransitionError: Transition not allowed.
        """
        ...

    async def remove(self, listing_id: UUID) -> None:
        """Delete an available listing, freeing its fingerprint.

        Raises:
            ListingNotFoundError: No listing with ``listing_id``.
            InvalidListingTransitionError: Listing is not available.
        """
        ...
