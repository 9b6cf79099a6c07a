"""PostgreSQL adapters (SQLAlchemy async, asyncpg driver)."""

from resale_gate.infrastructure.adapters.persistence.event_store import (
    PostgresEventStore,
)
from resale_gate.infrastructure.adapters.persistence.listing_store import (
    PostgresListingStore,
)
from resale_gate.infrastructure.adapters.persistence.ticket_registry import (
    PostgresTicketRegistry,
)

__all__: list[str] = [
    "PostgresEventStore",
    "PostgresListingStore",
    "PostgresTicketRegistry",
]
