"""Unit tests for listing admission dependency wiring."""

import pytest

from resale_gate.bootstrap import listing_admission as bootstrap
from resale_gate.config.admission_config import TEST_ADMISSION_CONFIG
from resale_gate.domain.models.verification import VerificationMode
from resale_gate.infrastructure.stubs import (
    EventStoreStub,
    ListingStoreStub,
    TicketRegistryStub,
)


@pytest.fixture(autouse=True)
def _reset(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("TICKET_SIGNING_SECRET", raising=False)
    monkeypatch.delenv("TICKET_VERIFICATION_MODE", raising=False)
    bootstrap.reset_listing_admission_dependencies()
    yield
    bootstrap.reset_listing_admission_dependencies()


def test_stubs_without_database_url() -> None:
    assert isinstance(bootstrap.get_event_store(), EventStoreStub)
    assert isinstance(bootstrap.get_ticket_registry(), TicketRegistryStub)
    assert isinstance(bootstrap.get_listing_store(), ListingStoreStub)


def test_singletons() -> None:
    assert bootstrap.get_listing_store() is bootstrap.get_listing_store()
    assert (
        bootstrap.get_listing_admission_service()
        is bootstrap.get_listing_admission_service()
    )


def test_config_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("TICKET_SIGNING_SECRET", "from-env")

    config = bootstrap.get_admission_config()

    assert config.verification_mode is VerificationMode.ENFORCED


def test_degraded_without_secret() -> None:
    service = bootstrap.get_listing_admission_service()

    assert service.verifier.mode is VerificationMode.DEGRADED_ACCEPT_ALL


def test_setters_override() -> None:
    store = ListingStoreStub()
    bootstrap.set_admission_config(TEST_ADMISSION_CONFIG)
    bootstrap.set_listing_store(store)

    service = bootstrap.get_listing_admission_service()

    assert service.config is TEST_ADMISSION_CONFIG
    assert bootstrap.get_listing_store() is store


def test_postgres_failure_is_not_masked_by_stub(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/resale")

    def _broken():
        raise RuntimeError("driver missing")

    monkeypatch.setattr(bootstrap, "_postgres_listing_store", _broken)

    with pytest.raises(RuntimeError, match="driver missing"):
        bootstrap.get_listing_store()
    assert bootstrap._listing_store is None


def test_admission_service_fails_when_postgres_unusable(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/resale")
    monkeypatch.setattr(bootstrap, "_postgres_event_store", lambda: EventStoreStub())
    monkeypatch.setattr(
        bootstrap, "_postgres_ticket_registry", lambda: TicketRegistryStub()
    )

    def _broken():
        raise RuntimeError("connection refused")

    monkeypatch.setattr(bootstrap, "_postgres_listing_store", _broken)

    with pytest.raises(RuntimeError):
        bootstrap.get_listing_admission_service()


def test_postgres_selected_with_database_url(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/resale")
    sentinel = object()
    monkeypatch.setattr(bootstrap, "_postgres_event_store", lambda: sentinel)

    assert bootstrap.get_event_store() is sentinel


def test_lifecycle_service_shares_listing_store() -> None:
    store = ListingStoreStub()
    bootstrap.set_listing_store(store)

    lifecycle = bootstrap.get_listing_lifecycle_service()

    assert lifecycle._store is store
