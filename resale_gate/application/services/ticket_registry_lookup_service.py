"""Ticket lifecycle resolution and structural screening.

After signature verification every payload gets exactly one of two checks:

- Verified token with a ticket reference: the registry is authoritative.
  No record means the reference was forged or replayed against our key,
  so UNKNOWN_TICKET is a hard rejection.
- Anything unverified: structural screening, which only rejects proofs that
  cannot plausibly identify a ticket. Screening never makes a proof trusted.

Lifecycle mapping:
    REVOKED (flag or status) -> CANCELLED
    USED                     -> ALREADY_USED
    EXPIRED                  -> EXPIRED
    ACTIVE                   -> proceed
"""

from __future__ import annotations

from typing import Any, Mapping

from resale_gate.application.ports.ticket_registry import TicketRegistryProtocol
from resale_gate.application.services.base import LoggingMixin
from resale_gate.config.admission_config import (
    MAX_PROOF_TEXT_LENGTH,
    MIN_UNSTRUCTURED_PROOF_LENGTH,
)
from resale_gate.domain.errors import (
    AlreadyUsedError,
    ExpiredError,
    InvalidFormatError,
    TicketCancelledError,
    UnknownTicketError,
)
from resale_gate.domain.models.ticket_lifecycle import TicketLifecycleState
from resale_gate.domain.models.ticket_payload import (
    SignedStructuredPayload,
    StructuredUnverifiedPayload,
    TicketPayload,
    UnstructuredPayload,
)
from resale_gate.domain.models.verification import TrustAssessment

IDENTIFIER_FIELDS = (
    "id",
    "tid",
    "ticket_id",
    "ticketId",
    "number",
    "code",
    "ref",
    "token",
)
MIN_STRUCTURED_FIELDS = 2

UNRECOGNIZABLE_STRUCTURE_MESSAGE = (
    "QR code does not contain recognizable ticket information"
)
TOO_SHORT_MESSAGE = "QR code text is too short to be a valid ticket"
TOO_LONG_MESSAGE = "QR code text is too long (max 10 000 characters)"
LIFECYCLE_EXPIRED_MESSAGE = "This ticket has expired"


def has_identifier_field(fields: Mapping[str, Any]) -> bool:
    """Whether any known identifier field holds a non-empty string."""
    return any(
        isinstance(fields.get(name), str) and len(fields[name]) > 0
        for name in IDENTIFIER_FIELDS
    )


def screen_structured_fields(fields: Mapping[str, Any]) -> None:
    """Reject a mapping that cannot identify a ticket.

    Raises:
        InvalidFormatError: No identifier field and fewer than two fields.
    """
    if not has_identifier_field(fields) and len(fields) < MIN_STRUCTURED_FIELDS:
        raise InvalidFormatError(UNRECOGNIZABLE_STRUCTURE_MESSAGE)


def screen_opaque_text(text: str) -> None:
    """Reject opaque proof text outside 5..10,000 characters.

    Raises:
        InvalidFormatError: Text too short or too long.
    """
    if len(text) < MIN_UNSTRUCTURED_PROOF_LENGTH:
        raise InvalidFormatError(TOO_SHORT_MESSAGE)
    if len(text) > MAX_PROOF_TEXT_LENGTH:
        raise InvalidFormatError(TOO_LONG_MESSAGE)


class TicketRegistryLookupService(LoggingMixin):
    """Applies lifecycle checks to verified tokens and screening to the rest.

    Usage:
        lookup = TicketRegistryLookupService(registry)
        await lookup.check(payload, assessment)
    """

    def __init__(self, registry: TicketRegistryProtocol) -> None:
        self._registry = registry
        self._init_logger(component="registry")

    async def resolve_state(self, reference: str) -> TicketLifecycleState:
        """Return the lifecycle state of ``reference``, UNKNOWN when absent."""
        record = await self._registry.lookup(reference)
        if record is None:
            return TicketLifecycleState.UNKNOWN
        return record.state

    async def check_lifecycle(self, reference: str) -> TicketLifecycleState:
        """Require the referenced ticket to be ACTIVE.

        Args:
            reference: Ticket reference from verified token claims.

        Returns:
            TicketLifecycleState.ACTIVE.

        Raises:
            UnknownTicketError: No registry record.
            TicketCancelledError: Revoked.
            AlreadyUsedError: Scanned at the event.
            ExpiredError: Expired.
        """
        log = self._log_operation("check_lifecycle")
        state = await self.resolve_state(reference)

        if state is TicketLifecycleState.UNKNOWN:
            log.warning("verified_reference_not_in_registry")
            raise UnknownTicketError()
        if state is TicketLifecycleState.REVOKED:
            log.info("ticket_revoked")
            raise TicketCancelledError()
        if state is TicketLifecycleState.USED:
            log.info("ticket_already_used")
            raise AlreadyUsedError()
        if state is TicketLifecycleState.EXPIRED:
            log.info("ticket_lifecycle_expired")
            raise ExpiredError(LIFECYCLE_EXPIRED_MESSAGE)

        return state

    def screen(self, payload: TicketPayload) -> None:
        """Structural screening for a payload that did not verify.

        An unverified ``sig`` field still counts as a field. Signed tokens
        have no screening rule: in degraded mode they are accepted on
        deduplication alone.
        """
        if isinstance(payload, SignedStructuredPayload):
            screen_structured_fields({**payload.fields, "sig": payload.signature_hex})
        elif isinstance(payload, StructuredUnverifiedPayload):
            screen_structured_fields(payload.fields)
        elif isinstance(payload, UnstructuredPayload):
            screen_opaque_text(payload.raw)

    async def check(self, payload: TicketPayload, assessment: TrustAssessment) -> None:
        """Run the lifecycle check or the structural screen, whichever applies.

        Raises:
            ListingAdmissionError: The matching subclass for the failing check.
        """
        if assessment.cryptographically_verified:
            if assessment.ticket_reference is not None:
                await self.check_lifecycle(assessment.ticket_reference)
            return
        self.screen(payload)
