"""Bootstrap wiring for listing admission dependencies.

Stores are PostgreSQL-backed when DATABASE_URL is set, otherwise in-memory
stubs. The admission config is read once from the environment.
"""

from __future__ import annotations

import os
from typing import Callable, TypeVar

from structlog import get_logger

from resale_gate.application.ports.event_store import EventStoreProtocol
from resale_gate.application.ports.listing_store import ListingStoreProtocol
from resale_gate.application.ports.ticket_registry import TicketRegistryProtocol
from resale_gate.application.services.listing_admission_service import (
    ListingAdmissionService,
)
from resale_gate.application.services.listing_lifecycle_service import (
    ListingLifecycleService,
)
from resale_gate.config.admission_config import AdmissionConfig
from resale_gate.infrastructure.monitoring.metrics import get_metrics_collector
from resale_gate.infrastructure.stubs.event_store_stub import EventStoreStub
from resale_gate.infrastructure.stubs.listing_store_stub import ListingStoreStub
from resale_gate.infrastructure.stubs.ticket_registry_stub import TicketRegistryStub

logger = get_logger()

T = TypeVar("T")

_admission_config: AdmissionConfig | None = None
_event_store: EventStoreProtocol | None = None
_ticket_registry: TicketRegistryProtocol | None = None
_listing_store: ListingStoreProtocol | None = None
_listing_admission_service: ListingAdmissionService | None = None
_listing_lifecycle_service: ListingLifecycleService | None = None


def _select_store(name: str, postgres_factory: Callable[[], T], stub: Callable[[], T]) -> T:
    """Build the PostgreSQL adapter if DATABASE_URL is set, else the stub.

    A failing PostgreSQL init is logged and re-raised. Once DATABASE_URL is
    set there is no stub fallback.
    """
    if os.environ.get("DATABASE_URL"):
        try:
            store = postgres_factory()
            logger.info(
                f"{name}_initialized",
                repository_type="PostgreSQL",
            )
            return store
        except Exception as e:
            logger.error(
                f"postgres_{name}_init_failed",
                error=str(e),
            )
            raise
    logger.warning(
        f"{name}_initialized",
        repository_type="InMemoryStub",
        message="DATABASE_URL not set - using in-memory stub (data will not persist)",
    )
    return stub()


def _postgres_event_store() -> EventStoreProtocol:
    from resale_gate.bootstrap.database import get_session_factory
    from resale_gate.infrastructure.adapters.persistence.event_store import (
        PostgresEventStore,
    )

    return PostgresEventStore(session_factory=get_session_factory())


def _postgres_ticket_registry() -> TicketRegistryProtocol:
    from resale_gate.bootstrap.database import get_session_factory
    from resale_gate.infrastructure.adapters.persistence.ticket_registry import (
        PostgresTicketRegistry,
    )

    return PostgresTicketRegistry(session_factory=get_session_factory())


def _postgres_listing_store() -> ListingStoreProtocol:
    from resale_gate.bootstrap.database import get_session_factory
    from resale_gate.infrastructure.adapters.persistence.listing_store import (
        PostgresListingStore,
    )

    return PostgresListingStore(session_factory=get_session_factory())


def get_admission_config() -> AdmissionConfig:
    """Get admission configuration (read from the environment once)."""
    global _admission_config
    if _admission_config is None:
        _admission_config = AdmissionConfig.from_environment()
    return _admission_config


def get_event_store() -> EventStoreProtocol:
    """Get event store instance."""
    global _event_store
    if _event_store is None:
        _event_store = _select_store("event_store", _postgres_event_store, EventStoreStub)
    return _event_store


def get_ticket_registry() -> TicketRegistryProtocol:
    """Get ticket registry instance."""
    global _ticket_registry
    if _ticket_registry is None:
        _ticket_registry = _select_store(
            "ticket_registry", _postgres_ticket_registry, TicketRegistryStub
        )
    return _ticket_registry


def get_listing_store() -> ListingStoreProtocol:
    """Get listing store instance."""
    global _listing_store
    if _listing_store is None:
        _listing_store = _select_store(
            "listing_store", _postgres_listing_store, ListingStoreStub
        )
    return _listing_store


def get_listing_admission_service() -> ListingAdmissionService:
    """Get the listing admission service, wired to the configured stores."""
    global _listing_admission_service
    if _listing_admission_service is None:
        config = get_admission_config()
        _listing_admission_service = ListingAdmissionService(
            event_store=get_event_store(),
            ticket_registry=get_ticket_registry(),
            listing_store=get_listing_store(),
            config=config,
            metrics=get_metrics_collector(),
        )
        logger.info(
            "listing_admission_service_initialized",
            verification_mode=config.verification_mode.value,
        )
    return _listing_admission_service


def get_listing_lifecycle_service() -> ListingLifecycleService:
    """Get the listing lifecycle service."""
    global _listing_lifecycle_service
    if _listing_lifecycle_service is None:
        _listing_lifecycle_service = ListingLifecycleService(get_listing_store())
    return _listing_lifecycle_service


def set_admission_config(config: AdmissionConfig) -> None:
    """Set custom admission config for testing."""
    global _admission_config
    _admission_config = config


def set_event_store(store: EventStoreProtocol) -> None:
    """Set custom event store for testing."""
    global _event_store
    _event_store = store


def set_ticket_registry(registry: TicketRegistryProtocol) -> None:
    """Set custom ticket registry for testing."""
    global _ticket_registry
    _ticket_registry = registry


def set_listing_store(store: ListingStoreProtocol) -> None:
    """Set custom listing store for testing."""
    global _listing_store
    _listing_store = store


def set_listing_admission_service(service: ListingAdmissionService) -> None:
    """Set custom admission service for testing."""
    global _listing_admission_service
    _listing_admission_service = service


def reset_listing_admission_dependencies() -> None:
    """Reset listing admission dependency singletons."""
    global _admission_config
    global _event_store
    global _ticket_registry
    global _listing_store
    global _listing_admission_service
    global _listing_lifecycle_service

    _admission_config = None
    _event_store = None
    _ticket_registry = None
    _listing_store = None
    _listing_admission_service = None
    _listing_lifecycle_service = None
