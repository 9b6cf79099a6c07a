"""
Pytest configuration and shared fixtures for resale gate tests.

Testing Standards:
- All async tests run under pytest-asyncio (auto mode in pyproject.toml)
- Use AsyncMock for failure injection
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Time-dependent tests use FakeTimeAuthority, never the wall clock
"""

from collections.abc import Callable
from uuid import UUID, uuid4

import pytest

from resale_gate.application.ports.listing_admission import ListingSubmission
from resale_gate.application.services.listing_admission_service import (
    ListingAdmissionService,
)
from resale_gate.application.services.ticket_token_issuer import TicketTokenIssuer
from resale_gate.config.admission_config import (
    TEST_ADMISSION_CONFIG,
    TEST_SIGNING_SECRET,
    AdmissionConfig,
)
from resale_gate.infrastructure.stubs.event_store_stub import EventStoreStub
from resale_gate.infrastructure.stubs.listing_store_stub import ListingStoreStub
from resale_gate.infrastructure.stubs.ticket_registry_stub import TicketRegistryStub
from tests.helpers.constants import EVENT_ID, FROZEN_NOW
from tests.helpers.fake_time_authority import FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from resale_gate import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Clock frozen at FROZEN_NOW."""
    return FakeTimeAuthority(frozen_at=FROZEN_NOW)


@pytest.fixture
def event_store(fake_time_authority: FakeTimeAuthority) -> EventStoreStub:
    """Event store with one active event a week out and no base price."""
    store = EventStoreStub()
    store.add_upcoming_event(EVENT_ID, now=fake_time_authority.utcnow())
    return store


@pytest.fixture
def ticket_registry() -> TicketRegistryStub:
    return TicketRegistryStub()


@pytest.fixture
def listing_store() -> ListingStoreStub:
    return ListingStoreStub()


@pytest.fixture
def seller_id() -> UUID:
    return uuid4()


@pytest.fixture
def make_admission_service(
    event_store: EventStoreStub,
    ticket_registry: TicketRegistryStub,
    listing_store: ListingStoreStub,
    fake_time_authority: FakeTimeAuthority,
) -> Callable[..., ListingAdmissionService]:
    """Factory for admission services over the shared stubs."""

    def _make(config: AdmissionConfig = TEST_ADMISSION_CONFIG) -> ListingAdmissionService:
        return ListingAdmissionService(
            event_store=event_store,
            ticket_registry=ticket_registry,
            listing_store=listing_store,
            config=config,
            time_authority=fake_time_authority,
        )

    return _make


@pytest.fixture
def admission_service(
    make_admission_service: Callable[..., ListingAdmissionService],
) -> ListingAdmissionService:
    """Admission service in ENFORCED mode with the test signing secret."""
    return make_admission_service()


@pytest.fixture
def token_issuer(fake_time_authority: FakeTimeAuthority) -> TicketTokenIssuer:
    return TicketTokenIssuer(TEST_SIGNING_SECRET, time_authority=fake_time_authority)


@pytest.fixture
def make_submission() -> Callable[..., ListingSubmission]:
    """Factory for submissions against EVENT_ID."""

    def _make(
        qr_text: object = "QR-EBS-SKI-2025-001",
        selling_price: object = 25.0,
        event_id: object = EVENT_ID,
        quantity: object = None,
        notes: object = None,
    ) -> ListingSubmission:
        return ListingSubmission(
            event_id=event_id,
            selling_price=selling_price,
            qr_text=qr_text,
            quantity=quantity,
            notes=notes,
        )

    return _make
