"""Admission outcome codes.

The admission engine answers every submission with exactly one code. The
set is closed: callers can switch over it exhaustively and no generic
"validation failed" bucket exists once a more specific kind applies.
"""

from __future__ import annotations

from enum import Enum

VALID_CODE = "VALID"


class AdmissionErrorKind(Enum):
    """Closed taxonomy of admission rejections.

    Kinds:
        INVALID_FORMAT: Malformed input, bad signature, out-of-range values,
            missing event.
        UNKNOWN_TICKET: Signature verified but no lifecycle record exists.
        ALREADY_LISTED: Fingerprint already has an active or sold listing.
        ALREADY_USED: Lifecycle state is USED.
        CANCELLED: Lifecycle state is REVOKED.
        EXPIRED: Event inactive or past, token expiry past, or lifecycle EXPIRED.
        RATE_LIMITED: Seller exceeded the listing rate for the window.
        INTERNAL_ERROR: Unexpected fault (timeout, store unavailable, bug).
    """

    INVALID_FORMAT = "INVALID_FORMAT"
    UNKNOWN_TICKET = "UNKNOWN_TICKET"
    ALREADY_LISTED = "ALREADY_LISTED"
    ALREADY_USED = "ALREADY_USED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def http_status(self) -> int:
        """HTTP status equivalent for this kind."""
        return _HTTP_STATUS[self]

    def is_fault(self) -> bool:
        """Whether this kind represents a server fault rather than a rejection.

        Only faults are logged as errors and alerted on.
        """
        return self is AdmissionErrorKind.INTERNAL_ERROR


_HTTP_STATUS: dict[AdmissionErrorKind, int] = {
    AdmissionErrorKind.INVALID_FORMAT: 400,
    AdmissionErrorKind.UNKNOWN_TICKET: 400,
    AdmissionErrorKind.ALREADY_LISTED: 409,
    AdmissionErrorKind.ALREADY_USED: 400,
    AdmissionErrorKind.CANCELLED: 400,
    AdmissionErrorKind.EXPIRED: 400,
    AdmissionErrorKind.RATE_LIMITED: 429,
    AdmissionErrorKind.INTERNAL_ERROR: 500,
}
