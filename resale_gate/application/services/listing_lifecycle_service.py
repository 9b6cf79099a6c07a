"""Listing lifecycle transitions driven by the purchase flow.

    reserve:  available -> reserved
    release:  reserved  -> available
    sell:     reserved  -> sold
    withdraw: available -> (deleted, fingerprint freed)

The listing store enforces the transition matrix; this service names the
operations and logs them.
"""

from __future__ import annotations

from uuid import UUID

from resale_gate.application.ports.listing_store import ListingStoreProtocol
from resale_gate.application.services.base import LoggingMixin
from resale_gate.domain.models.listing import ListingRecord, ListingStatus


class ListingLifecycleService(LoggingMixin):
    """Moves listings through reserve, release, sell and withdraw."""

    def __init__(self, listing_store: ListingStoreProtocol) -> None:
        self._store = listing_store
        self._init_logger(component="listing")

    async def reserve(self, listing_id: UUID) -> ListingRecord:
        """A buyer started checkout."""
        return await self._transition(listing_id, ListingStatus.RESERVED)

    async def release(self, listing_id: UUID) -> ListingRecord:
        """Checkout was abandoned; the listing is available again."""
        return await self._transition(listing_id, ListingStatus.AVAILABLE)

    async def sell(self, listing_id: UUID) -> ListingRecord:
        """Payment settled. Final."""
        return await self._transition(listing_id, ListingStatus.SOLD)

    async def withdraw(self, listing_id: UUID) -> None:
        """Seller removed an available listing.

        Raises:
            ListingNotFoundError: Unknown listing.
            InvalidListingTransitionError: Listing is reserved or sold.
        """
        log = self._log_operation("withdraw_listing", listing_id=str(listing_id))
        await self._store.remove(listing_id)
        log.info("listing_withdrawn")

    async def _transition(
        self, listing_id: UUID, status: ListingStatus
    ) -> ListingRecord:
        log = self._log_operation(
            "transition_listing", listing_id=str(listing_id), to_status=status.value
        )
        updated = await self._store.update_status(listing_id, status)
        log.info("listing_status_changed")
        return updated
