"""Domain models for the listing admission engine."""

from resale_gate.domain.models.admission import VALID_CODE, AdmissionErrorKind
from resale_gate.domain.models.event import EventRecord
from resale_gate.domain.models.issued_ticket import IssuedTicketRecord
from resale_gate.domain.models.listing import (
    LISTING_TRANSITION_MATRIX,
    TERMINAL_LISTING_STATUSES,
    ListingRecord,
    ListingStatus,
)
from resale_gate.domain.models.ticket_lifecycle import (
    LIFECYCLE_TRANSITION_MATRIX,
    TicketLifecycleRecord,
    TicketLifecycleState,
)
from resale_gate.domain.models.ticket_payload import (
    PayloadKind,
    SignedStructuredPayload,
    SignedTokenPayload,
    StructuredUnverifiedPayload,
    TicketPayload,
    UnstructuredPayload,
)
from resale_gate.domain.models.verification import TrustAssessment, VerificationMode

__all__: list[str] = [
    "AdmissionErrorKind",
    "EventRecord",
    "IssuedTicketRecord",
    "LIFECYCLE_TRANSITION_MATRIX",
    "LISTING_TRANSITION_MATRIX",
    "ListingRecord",
    "ListingStatus",
    "PayloadKind",
    "SignedStructuredPayload",
    "SignedTokenPayload",
    "StructuredUnverifiedPayload",
    "TERMINAL_LISTING_STATUSES",
    "TicketLifecycleRecord",
    "TicketLifecycleState",
    "TicketPayload",
    "TrustAssessment",
    "UnstructuredPayload",
    "VALID_CODE",
    "VerificationMode",
]
