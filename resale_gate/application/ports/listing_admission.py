"""Listing admission port.

Defines the submission the API hands to the admission engine and the result
it gets back on success. Rejections are raised as ListingAdmissionError
subclasses, one per admission error kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from resale_gate.domain.models.admission import VALID_CODE
from resale_gate.domain.models.listing import ListingRecord


@dataclass(frozen=True)
class ListingSubmission:
    """A seller's proposed listing, exactly as received.

    Field values are untyped on purpose: shape validation is part of
    admission and produces INVALID_FORMAT, not a transport error.

    Attributes:
        event_id: Event the ticket is for.
        selling_price: Asking price (number or numeric string).
        qr_text: Raw ticket proof text.
        quantity: Tickets covered by the proof. None means 1.
        notes: Free-text notes for buyers.
    """

    event_id: Any
    selling_price: Any
    qr_text: Any
    quantity: Any = None
    notes: Any = None


@dataclass(frozen=True)
class AdmissionResult:
    """Successful admission.

    Attributes:
        listing: The stored listing.
        payload_kind: Classification label of the ticket proof.
        code: Always ``"VALID"``.
    """

    listing: ListingRecord
    payload_kind: str
    code: str = VALID_CODE

    @property
    def cryptographically_verified(self) -> bool:
        return self.listing.cryptographically_verified


class ListingAdmissionProtocol(Protocol):
    """Decides whether a proposed listing may enter the marketplace."""

    async def admit(
        self, seller_id: UUID, submission: ListingSubmission
    ) -> AdmissionResult:
        """Admit or reject one listing.

        Args:
            seller_id: Authenticated seller. Never taken from the body.
            submission: The proposed listing.

        Returns:
            AdmissionResult with the stored listing.

        Raises:
            ListingAdmissionError: The first failing check, as its subclass.
        """
        ...
