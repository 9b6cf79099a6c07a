"""Unit tests for ListingLifecycleService."""

from uuid import uuid4

import pytest

from resale_gate.application.services.fingerprint_service import compute_fingerprint
from resale_gate.application.services.listing_lifecycle_service import (
    ListingLifecycleService,
)
from resale_gate.domain.errors import (
    InvalidListingTransitionError,
    ListingNotFoundError,
)
from resale_gate.domain.models.listing import ListingRecord, ListingStatus
from tests.helpers.constants import EVENT_ID


@pytest.fixture
def lifecycle(listing_store) -> ListingLifecycleService:
    return ListingLifecycleService(listing_store)


@pytest.fixture
def listing(listing_store, seller_id) -> ListingRecord:
    record = ListingRecord(
        id=uuid4(),
        event_id=EVENT_ID,
        seller_id=seller_id,
        original_price=20.0,
        selling_price=21.0,
        quantity=1,
        notes=None,
        fingerprint=compute_fingerprint("TICKET-LIFECYCLE-1"),
    )
    listing_store.seed(record)
    return record


async def test_reserve_then_sell(lifecycle, listing) -> None:
    reserved = await lifecycle.reserve(listing.id)
    assert reserved.status is ListingStatus.RESERVED

    sold = await lifecycle.sell(listing.id)
    assert sold.status is ListingStatus.SOLD
    assert sold.fingerprint == listing.fingerprint


async def test_release_returns_to_available(lifecycle, listing) -> None:
    await lifecycle.reserve(listing.id)

    released = await lifecycle.release(listing.id)

    assert released.status is ListingStatus.AVAILABLE


async def test_sell_requires_reservation(lifecycle, listing) -> None:
    with pytest.raises(InvalidListingTransitionError) as exc_info:
        await lifecycle.sell(listing.id)

    assert exc_info.value.from_status == "available"
    assert exc_info.value.to_status == "sold"


async def test_sold_is_final(lifecycle, listing) -> None:
    await lifecycle.reserve(listing.id)
    await lifecycle.sell(listing.id)

    with pytest.raises(InvalidListingTransitionError):
        await lifecycle.release(listing.id)


async def test_withdraw_frees_fingerprint(lifecycle, listing, listing_store) -> None:
    await lifecycle.withdraw(listing.id)

    assert await listing_store.get(listing.id) is None
    assert await listing_store.find_by_fingerprint(listing.fingerprint) is None


async def test_withdraw_reserved_rejected(lifecycle, listing, listing_store) -> None:
    await lifecycle.reserve(listing.id)

    with pytest.raises(InvalidListingTransitionError) as exc_info:
        await lifecycle.withdraw(listing.id)

    assert exc_info.value.to_status == "removed"
    assert await listing_store.get(listing.id) is not None


async def test_unknown_listing(lifecycle) -> None:
    with pytest.raises(ListingNotFoundError):
        await lifecycle.reserve(uuid4())


async def test_withdrawn_ticket_can_be_listed_again(
    lifecycle, admission_service, seller_id, make_submission
) -> None:
    first = await admission_service.admit(seller_id, make_submission())
    await lifecycle.withdraw(first.listing.id)

    second = await admission_service.admit(seller_id, make_submission())

    assert second.listing.id != first.listing.id
    assert second.listing.fingerprint == first.listing.fingerprint
