"""Listing admission errors.

One exception class per admission error kind. Every rejection raised by the
admission engine is one of these, carrying a user-presentable message that
is safe to return verbatim.

Propagation policy:
- Checks fail fast: the first failing check raises and nothing after it runs.
- Only AdmissionInternalError represents a fault; all other kinds are
  expected outcomes and are not logged as errors.
- Messages never include internal detail (stack traces, SQL, secrets).
"""

from __future__ import annotations

from typing import Any, ClassVar
from uuid import UUID

from resale_gate.domain.exceptions import ResaleGateError
from resale_gate.domain.models.admission import AdmissionErrorKind


class ListingAdmissionError(ResaleGateError):
    """Base error for a rejected listing submission.

    Attributes:
        kind: The admission error kind this class represents.
        message: User-facing reason.
    """

    kind: ClassVar[AdmissionErrorKind] = AdmissionErrorKind.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: User-facing reason for the rejection.
        """
        self.message = message
        super().__init__(message)

    @property
    def code(self) -> str:
        """Wire code for the response body."""
        return self.kind.value

    @property
    def http_status(self) -> int:
        """HTTP status equivalent."""
        return self.kind.http_status

    def to_response_dict(self) -> dict[str, Any]:
        """Serialize to the ``{code, message}`` response body."""
        return {"code": self.code, "message": self.message}


class InvalidFormatError(ListingAdmissionError):
    """Malformed input, bad signature, out-of-range values or missing event.

    HTTP Status: 400 Bad Request
    """

    kind = AdmissionErrorKind.INVALID_FORMAT


class UnknownTicketError(ListingAdmissionError):
    """A verified token references a ticket the registry does not know.

    A signature that verifies but points nowhere implies a forged or replayed
    reference against the real signing key, so it is a hard rejection.

    HTTP Status: 400 Bad Request
    """

    kind = AdmissionErrorKind.UNKNOWN_TICKET

    def __init__(self, message: str = "Ticket not found in our system") -> None:
        super().__init__(message)


class AlreadyListedError(ListingAdmissionError):
    """The ticket proof already backs an active or sold listing.

    HTTP Status: 409 Conflict

    Attributes:
        already_sold: True when the existing listing is sold.
    """

    kind = AdmissionErrorKind.ALREADY_LISTED

    def __init__(self, already_sold: bool = False) -> None:
        self.already_sold = already_sold
        if already_sold:
            message = "This ticket has already been sold on the marketplace"
        else:
            message = "This ticket is already listed on the marketplace"
        super().__init__(message)


class AlreadyUsedError(ListingAdmissionError):
    """The ticket was already scanned at the event.

    HTTP Status: 400 Bad Request
    """

    kind = AdmissionErrorKind.ALREADY_USED

    def __init__(
        self, message: str = "This ticket has already been used at the event"
    ) -> None:
        super().__init__(message)


class TicketCancelledError(ListingAdmissionError):
    """The ticket was revoked or cancelled by the organizer.

    HTTP Status: 400 Bad Request
    """

    kind = AdmissionErrorKind.CANCELLED

    def __init__(
        self, message: str = "This ticket has been revoked or cancelled"
    ) -> None:
        super().__init__(message)


class ExpiredError(ListingAdmissionError):
    """Event inactive or past, token expired, or ticket lifecycle EXPIRED.

    HTTP Status: 400 Bad Request
    """

    kind = AdmissionErrorKind.EXPIRED


class RateLimitExceededError(ListingAdmissionError):
    """Seller created too many listings in the trailing window.

    HTTP Status: 429 Too Many Requests (with Retry-After)

    Attributes:
        seller_id: Rate-limited seller.
        current_count: Listings created in the window.
        limit: Configured maximum per window.
        window_minutes: Window size.
        retry_after_seconds: Suggested client retry delay.
    """

    kind = AdmissionErrorKind.RATE_LIMITED

    def __init__(
        self,
        seller_id: UUID,
        current_count: int,
        limit: int,
        window_minutes: int = 60,
        retry_after_seconds: int | None = None,
    ) -> None:
        self.seller_id = seller_id
        self.current_count = current_count
        self.limit = limit
        self.window_minutes = window_minutes
        self.retry_after_seconds = (
            retry_after_seconds
            if retry_after_seconds is not None
            else window_minutes * 60
        )
        super().__init__(
            f"Rate limit exceeded: max {limit} listings per "
            f"{_describe_window(window_minutes)}. "
            "Please wait before listing again."
        )


class AdmissionInternalError(ListingAdmissionError):
    """Unexpected fault: timeout, store unavailable or programming error.

    The message is deliberately generic; the cause is logged server side.

    HTTP Status: 500 Internal Server Error
    """

    kind = AdmissionErrorKind.INTERNAL_ERROR

    def __init__(
        self, message: str = "An unexpected error occurred. Please try again."
    ) -> None:
        super().__init__(message)


def _describe_window(window_minutes: int) -> str:
    if window_minutes == 60:
        return "hour"
    return f"{window_minutes} minutes"
