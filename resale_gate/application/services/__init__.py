"""Application services for ticket authenticity and listing admission."""

from resale_gate.application.services.deduplication_ledger import DeduplicationLedger
from resale_gate.application.services.fingerprint_service import (
    compute_fingerprint,
    display_fingerprint,
)
from resale_gate.application.services.listing_admission_service import (
    ListingAdmissionService,
    validate_submission_shape,
)
from resale_gate.application.services.listing_lifecycle_service import (
    ListingLifecycleService,
)
from resale_gate.application.services.notes_sanitizer import sanitize_notes
from resale_gate.application.services.payload_classifier import classify_payload
from resale_gate.application.services.proof_precheck import (
    ProofPayloadSummary,
    is_proof_text_valid,
    summarize_proof_payload,
)
from resale_gate.application.services.signature_verifier import (
    SignatureVerifier,
    sign_structured_payload,
)
from resale_gate.application.services.ticket_registry_lookup_service import (
    TicketRegistryLookupService,
)
from resale_gate.application.services.ticket_token_issuer import (
    IssuedTicketToken,
    TicketTokenIssuer,
)

__all__: list[str] = [
    "DeduplicationLedger",
    "IssuedTicketToken",
    "ListingAdmissionService",
    "ListingLifecycleService",
    "ProofPayloadSummary",
    "SignatureVerifier",
    "TicketRegistryLookupService",
    "TicketTokenIssuer",
    "classify_payload",
    "compute_fingerprint",
    "display_fingerprint",
    "is_proof_text_valid",
    "sanitize_notes",
    "sign_structured_payload",
    "summarize_proof_payload",
    "validate_submission_shape",
]
