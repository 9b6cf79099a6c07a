"""Domain errors for the resale gate.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from ResaleGateError.
"""

from resale_gate.domain.errors.admission import (
    AdmissionInternalError,
    AlreadyListedError,
    AlreadyUsedError,
    ExpiredError,
    InvalidFormatError,
    ListingAdmissionError,
    RateLimitExceededError,
    TicketCancelledError,
    UnknownTicketError,
)
from resale_gate.domain.errors.configuration import AdmissionConfigurationError
from resale_gate.domain.errors.listing import (
    DuplicateFingerprintError,
    InvalidListingTransitionError,
    ListingNotFoundError,
    ListingStoreError,
)

__all__: list[str] = [
    "AdmissionConfigurationError",
    "AdmissionInternalError",
    "AlreadyListedError",
    "AlreadyUsedError",
    "DuplicateFingerprintError",
    "ExpiredError",
    "InvalidFormatError",
    "InvalidListingTransitionError",
    "ListingAdmissionError",
    "ListingNotFoundError",
    "ListingStoreError",
    "RateLimitExceededError",
    "TicketCancelledError",
    "UnknownTicketError",
]
