"""In-memory stubs of the admission engine's collaborator ports.

Used by tests and by the API when no DATABASE_URL is configured.
Production implementations are in resale_gate/infrastructure/adapters/.

Available stubs:
- EventStoreStub: events keyed by id
- TicketRegistryStub: lifecycle records keyed by ticket reference
- ListingStoreStub: listings with a unique fingerprint index
"""

from resale_gate.infrastructure.stubs.event_store_stub import EventStoreStub
from resale_gate.infrastructure.stubs.listing_store_stub import ListingStoreStub
from resale_gate.infrastructure.stubs.ticket_registry_stub import TicketRegistryStub

__all__: list[str] = [
    "EventStoreStub",
    "ListingStoreStub",
    "TicketRegistryStub",
]
