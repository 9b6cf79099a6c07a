"""Unit tests for the deduplication ledger."""

from uuid import uuid4

import pytest

from resale_gate.application.services.deduplication_ledger import DeduplicationLedger
from resale_gate.application.services.fingerprint_service import compute_fingerprint
from resale_gate.domain.errors import AlreadyListedError
from resale_gate.domain.models.listing import ListingRecord, ListingStatus
from resale_gate.infrastructure.stubs.listing_store_stub import ListingStoreStub


def _listing(fingerprint: str, status: ListingStatus) -> ListingRecord:
    return ListingRecord(
        id=uuid4(),
        event_id="evt-1",
        seller_id=uuid4(),
        original_price=0.0,
        selling_price=10.0,
        quantity=1,
        notes=None,
        fingerprint=fingerprint,
        status=status,
    )


@pytest.fixture
def store() -> ListingStoreStub:
    return ListingStoreStub()


async def test_unseen_fingerprint_passes(store) -> None:
    await DeduplicationLedger(store).ensure_not_listed(compute_fingerprint("new"))
    assert store.find_call_count == 1


@pytest.mark.parametrize("status", [ListingStatus.AVAILABLE, ListingStatus.RESERVED])
async def test_listed_fingerprint_rejected(store, status) -> None:
    fingerprint = compute_fingerprint("ticket")
    store.seed(_listing(fingerprint, status))

    with pytest.raises(AlreadyListedError) as exc_info:
        await DeduplicationLedger(store).ensure_not_listed(fingerprint)
    assert exc_info.value.already_sold is False


async def test_sold_fingerprint_rejected_as_sold(store) -> None:
    fingerprint = compute_fingerprint("ticket")
    store.seed(_listing(fingerprint, ListingStatus.SOLD))

    with pytest.raises(AlreadyListedError) as exc_info:
        await DeduplicationLedger(store).ensure_not_listed(fingerprint)
    assert exc_info.value.already_sold is True
    assert "sold" in exc_info.value.message
