"""Unit tests for the listing model and its state machine."""

from datetime import datetime, timezone
from uuid import uuid4

from resale_gate.domain.models.listing import (
    LISTING_TRANSITION_MATRIX,
    ListingRecord,
    ListingStatus,
)


def _listing(**overrides) -> ListingRecord:
    defaults = dict(
        id=uuid4(),
        event_id="evt-1",
        seller_id=uuid4(),
        original_price=50.0,
        selling_price=51.0,
        quantity=1,
        notes=None,
        fingerprint="a" * 64,
    )
    defaults.update(overrides)
    return ListingRecord(**defaults)


class TestListingStatus:
    def test_available_can_only_be_reserved(self) -> None:
        assert ListingStatus.AVAILABLE.valid_transitions() == frozenset(
            {ListingStatus.RESERVED}
        )

    def test_reserved_can_be_sold_or_released(self) -> None:
        assert ListingStatus.RESERVED.valid_transitions() == frozenset(
            {ListingStatus.SOLD, ListingStatus.AVAILABLE}
        )

    def test_sold_is_terminal(self) -> None:
        assert ListingStatus.SOLD.is_terminal()
        assert ListingStatus.SOLD.valid_transitions() == frozenset()

    def test_only_available_is_removable(self) -> None:
        assert ListingStatus.AVAILABLE.is_removable()
        assert not ListingStatus.RESERVED.is_removable()
        assert not ListingStatus.SOLD.is_removable()

    def test_matrix_covers_every_status(self) -> None:
        assert set(LISTING_TRANSITION_MATRIX) == set(ListingStatus)


class TestListingRecord:
    def test_defaults(self) -> None:
        listing = _listing()

        assert listing.status is ListingStatus.AVAILABLE
        assert listing.cryptographically_verified is False
        assert listing.created_at is not None
        assert listing.updated_at == listing.created_at

    def test_with_status_returns_updated_copy(self) -> None:
        listing = _listing()
        at = datetime(2026, 2, 1, tzinfo=timezone.utc)

        reserved = listing.with_status(ListingStatus.RESERVED, at=at)

        assert reserved.status is ListingStatus.RESERVED
        assert reserved.updated_at == at
        assert reserved.id == listing.id
        assert listing.status is ListingStatus.AVAILABLE

    def test_public_dict_hides_fingerprint(self) -> None:
        listing = _listing(notes="Row 3")

        public = listing.to_public_dict()

        assert "fingerprint" not in public
        assert public["eventId"] == "evt-1"
        assert public["sellingPrice"] == 51.0
        assert public["status"] == "available"
        assert public["notes"] == "Row 3"
        assert public["cryptographicallyVerified"] is False
