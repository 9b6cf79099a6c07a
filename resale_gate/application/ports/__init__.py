"""Ports for the collaborators of the admission engine."""

from resale_gate.application.ports.admission_metrics import AdmissionMetricsProtocol
from resale_gate.application.ports.event_store import EventStoreProtocol
from resale_gate.application.ports.listing_admission import (
    AdmissionResult,
    ListingAdmissionProtocol,
    ListingSubmission,
)
from resale_gate.application.ports.listing_store import ListingStoreProtocol
from resale_gate.application.ports.ticket_registry import (
    TicketIssuanceRegistryProtocol,
    TicketRegistryProtocol,
)
from resale_gate.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "AdmissionMetricsProtocol",
    "AdmissionResult",
    "EventStoreProtocol",
    "ListingAdmissionProtocol",
    "ListingStoreProtocol",
    "ListingSubmission",
    "TicketIssuanceRegistryProtocol",
    "TicketRegistryProtocol",
    "TimeAuthorityProtocol",
]
