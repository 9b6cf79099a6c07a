"""In-memory listing store for tests and local development.

Simulates the listings table, including the unique fingerprint index:
inserts are serialized by an asyncio.Lock and a second insert with a known
fingerprint raises DuplicateFingerprintError, exactly as the PostgreSQL
adapter does on a 23505 unique violation.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from uuid import UUID

from resale_gate.application.services.fingerprint_service import display_fingerprint
from resale_gate.domain.errors import (
    DuplicateFingerprintError,
    InvalidListingTransitionError,
    ListingNotFoundError,
)
from resale_gate.domain.models.listing import ListingRecord, ListingStatus

REMOVED_STATUS_LABEL = "removed"


class ListingStoreStub:
    """In-memory implementation of ListingStoreProtocol.

    Attributes:
        insert_call_count: Number of insert attempts, including rejected ones.
        find_call_count: Number of fingerprint lookups.
    """

    def __init__(self) -> None:
        self._listings: dict[UUID, ListingRecord] = {}
        self._by_fingerprint: dict[str, UUID] = {}
        self._lock = asyncio.Lock()
        self.insert_call_count = 0
        self.find_call_count = 0
        self.count_call_count = 0

    async def find_by_fingerprint(self, fingerprint: str) -> ListingRecord | None:
        self.find_call_count += 1
        listing_id = self._by_fingerprint.get(fingerprint)
        if listing_id is None:
            return None
        return self._listings[listing_id]

    async def insert(self, record: ListingRecord) -> ListingRecord:
        """Store ``record``.

        Raises:
            DuplicateFingerprintError: The fingerprint is already indexed.
        """
        async with self._lock:
            self.insert_call_count += 1
            if record.fingerprint in self._by_fingerprint:
                raise DuplicateFingerprintError(display_fingerprint(record.fingerprint))
            self._listings[record.id] = record
            self._by_fingerprint[record.fingerprint] = record.id
            return record

    async def count_recent_by_seller(self, seller_id: UUID, since: datetime) -> int:
        self.count_call_count += 1
        return sum(
            1
            for listing in self._listings.values()
            if listing.seller_id == seller_id
            and listing.created_at is not None
            and listing.created_at >= since
        )

    async def get(self, listing_id: UUID) -> ListingRecord | None:
        return self._listings.get(listing_id)

    async def update_status(
        self, listing_id: UUID, status: ListingStatus
    ) -> ListingRecord:
        """Apply a transition from LISTING_TRANSITION_MATRIX.

        Raises:
            ListingNotFoundError: Unknown listing.
            InvalidListingTransitionError: Transition not allowed.
        """
        async with self._lock:
            current = self._listings.get(listing_id)
            if current is None:
                raise ListingNotFoundError(listing_id)
            if status not in current.status.valid_transitions():
                raise InvalidListingTransitionError(
                    listing_id, current.status.value, status.value
                )
            updated = current.with_status(status, at=datetime.now(timezone.utc))
            self._listings[listing_id] = updated
            return updated

    async def remove(self, listing_id: UUID) -> None:
        """Delete an available listing and free its fingerprint.

        Raises:
            ListingNotFoundError: Unknown listing.
            InvalidListingTransitionError: Listing is reserved or sold.
        """
        async with self._lock:
            current = self._listings.get(listing_id)
            if current is None:
                raise ListingNotFoundError(listing_id)
            if not current.status.is_removable():
                raise InvalidListingTransitionError(
                    listing_id, current.status.value, REMOVED_STATUS_LABEL
                )
            del self._listings[listing_id]
            del self._by_fingerprint[current.fingerprint]

    # Test helper methods

    def seed(self, record: ListingRecord) -> None:
        """Store a record directly, bypassing the lock and counters."""
        self._listings[record.id] = record
        self._by_fingerprint[record.fingerprint] = record.id

    def all_listings(self) -> list[ListingRecord]:
        return list(self._listings.values())

    @property
    def total_calls(self) -> int:
        """All store calls made through the port, for "store untouched" checks."""
        return self.insert_call_count + self.find_call_count + self.count_call_count

    def clear(self) -> None:
        self._listings.clear()
        self._by_fingerprint.clear()
        self.insert_call_count = 0
        self.find_call_count = 0
        self.count_call_count = 0
