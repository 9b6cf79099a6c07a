"""Listing admission service.

Decides, for every proposed resale listing, whether it may enter the
marketplace. This is the only path that creates listings.

Check order (fail fast, first failure wins, nothing is written before the
final step):
    1. Shape: eventId, proof text, price, quantity         -> INVALID_FORMAT
    2. Seller rate over the trailing window                -> RATE_LIMITED
    3. Event exists, is active, is in the future           -> INVALID_FORMAT / EXPIRED
    4. Price cap against the event base price              -> INVALID_FORMAT
    5. Fingerprint deduplication                           -> ALREADY_LISTED
    6. Classify, verify signature, lifecycle or screening  -> per kind
    7. Sanitize notes
    8. Persist; a uniqueness conflict here                 -> ALREADY_LISTED

Event checks run before any cryptographic work. Expected rejections are
logged at info; only unexpected faults are logged as errors and surface as
INTERNAL_ERROR with a generic message.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Any
from uuid import UUID, uuid4

import structlog

from resale_gate.application.ports.admission_metrics import AdmissionMetricsProtocol
from resale_gate.application.ports.event_store import EventStoreProtocol
from resale_gate.application.ports.listing_admission import (
    AdmissionResult,
    ListingSubmission,
)
from resale_gate.application.ports.listing_store import ListingStoreProtocol
from resale_gate.application.ports.ticket_registry import TicketRegistryProtocol
from resale_gate.application.ports.time_authority import TimeAuthorityProtocol
from resale_gate.application.services.base import LoggingMixin
from resale_gate.application.services.deduplication_ledger import DeduplicationLedger
from resale_gate.application.services.fingerprint_service import (
    compute_fingerprint,
    display_fingerprint,
)
from resale_gate.application.services.notes_sanitizer import sanitize_notes
from resale_gate.application.services.payload_classifier import classify_payload
from resale_gate.application.services.signature_verifier import SignatureVerifier
from resale_gate.application.services.ticket_registry_lookup_service import (
    TOO_LONG_MESSAGE,
    TicketRegistryLookupService,
)
from resale_gate.config.admission_config import (
    DEFAULT_ADMISSION_CONFIG,
    MAX_PROOF_TEXT_LENGTH,
    AdmissionConfig,
)
from resale_gate.domain.errors import (
    AdmissionInternalError,
    AlreadyListedError,
    DuplicateFingerprintError,
    ExpiredError,
    InvalidFormatError,
    ListingAdmissionError,
    RateLimitExceededError,
)
from resale_gate.domain.models.admission import VALID_CODE, AdmissionErrorKind
from resale_gate.domain.models.event import EventRecord
from resale_gate.domain.models.listing import ListingRecord, ListingStatus
from resale_gate.infrastructure.adapters.time.system_time_authority import (
    SystemTimeAuthority,
)

EVENT_ID_REQUIRED_MESSAGE = "eventId is required"
PROOF_REQUIRED_MESSAGE = "QR code text is required"
EVENT_NOT_FOUND_MESSAGE = "Event not found"
EVENT_INACTIVE_MESSAGE = "This event is no longer active"
EVENT_PAST_MESSAGE = "Cannot sell tickets for past events"


@dataclass(frozen=True)
class ValidatedSubmission:
    """A submission whose shape passed validation.

    Attributes:
        event_id: Trimmed event id.
        proof_text: Trimmed ticket proof text.
        selling_price: Finite price within bounds.
        quantity: Integer quantity within bounds.
        notes: Raw notes, sanitized later.
    """

    event_id: str
    proof_text: str
    selling_price: float
    quantity: int
    notes: Any


def _format_amount(amount: float) -> str:
    """``1.0`` -> ``"1"``, ``0.5`` -> ``"0.5"``."""
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def _parse_price(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _parse_quantity(value: Any) -> int | None:
    if value is None:
        return 1
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def validate_submission_shape(
    submission: ListingSubmission, config: AdmissionConfig
) -> ValidatedSubmission:
    """Check field presence, types and ranges.

    Args:
        submission: The raw submission.
        config: Price and quantity bounds.

    Returns:
        The normalized submission.

    Raises:
        InvalidFormatError: The first field that fails.
    """
    event_id = submission.event_id
    if not isinstance(event_id, str) or not event_id.strip():
        raise InvalidFormatError(EVENT_ID_REQUIRED_MESSAGE)

    qr_text = submission.qr_text
    if not isinstance(qr_text, str) or not qr_text.strip():
        raise InvalidFormatError(PROOF_REQUIRED_MESSAGE)
    proof_text = qr_text.strip()
    if len(proof_text) > MAX_PROOF_TEXT_LENGTH:
        raise InvalidFormatError(TOO_LONG_MESSAGE)

    price = _parse_price(submission.selling_price)
    if (
        price is None
        or not math.isfinite(price)
        or price <= 0
        or price > config.max_price
    ):
        raise InvalidFormatError(
            "Selling price must be between €0.01 and "
            f"€{config.max_price:,.0f}"
        )

    quantity = _parse_quantity(submission.quantity)
    if quantity is None or quantity < 1 or quantity > config.max_quantity:
        raise InvalidFormatError(
            f"Quantity must be between 1 and {config.max_quantity}"
        )

    return ValidatedSubmission(
        event_id=event_id.strip(),
        proof_text=proof_text,
        selling_price=price,
        quantity=quantity,
        notes=submission.notes,
    )


class ListingAdmissionService(LoggingMixin):
    """Admits or rejects proposed resale listings.

    Usage:
        service = ListingAdmissionService(
            event_store=events,
            ticket_registry=registry,
            listing_store=listings,
            config=AdmissionConfig.from_environment(),
        )
        result = await service.admit(seller_id, submission)
    """

    def __init__(
        self,
        event_store: EventStoreProtocol,
        ticket_registry: TicketRegistryProtocol,
        listing_store: ListingStoreProtocol,
        config: AdmissionConfig = DEFAULT_ADMISSION_CONFIG,
        verifier: SignatureVerifier | None = None,
        time_authority: TimeAuthorityProtocol | None = None,
        metrics: AdmissionMetricsProtocol | None = None,
    ) -> None:
        """Initialize the admission service.

        Args:
            event_store: Read access to events.
            ticket_registry: Read access to ticket lifecycle records.
            listing_store: Listing persistence with a unique fingerprint.
            config: Admission policy.
            verifier: Signature verifier. Built from ``config`` when omitted.
            time_authority: Clock. Defaults to system time.
            metrics: Optional outcome metrics sink.
        """
        self._events = event_store
        self._listings = listing_store
        self._config = config
        self._time = time_authority or SystemTimeAuthority()
        self._verifier = verifier or SignatureVerifier.from_config(
            config, time_authority=self._time
        )
        self._registry_lookup = TicketRegistryLookupService(ticket_registry)
        self._ledger = DeduplicationLedger(listing_store)
        self._metrics = metrics
        self._init_logger(component="admission")

    @property
    def config(self) -> AdmissionConfig:
        return self._config

    @property
    def verifier(self) -> SignatureVerifier:
        return self._verifier

    async def admit(
        self, seller_id: UUID, submission: ListingSubmission
    ) -> AdmissionResult:
        """Admit or reject one listing.

        Args:
            seller_id: Authenticated seller.
            submission: The proposed listing, as received.

        Returns:
            AdmissionResult with the stored listing.

        Raises:
            InvalidFormatError: Malformed input, bad signature, price out of
                range or above the cap, or missing event.
            RateLimitExceededError: Seller is over the listing rate.
            ExpiredError: Event inactive or past, token or ticket expired.
            AlreadyListedError: Ticket already listed or sold.
            UnknownTicketError: Verified reference unknown to the registry.
            AlreadyUsedError: Ticket scanned at the event.
            TicketCancelledError: Ticket revoked.
            AdmissionInternalError: Any unexpected fault.
        """
        log = self._log_operation("admit_listing", seller_id=str(seller_id))
        started = self._time.monotonic()
        outcome = AdmissionErrorKind.INTERNAL_ERROR.value

        try:
            result = await self._admit(seller_id, submission, log)
            outcome = VALID_CODE
            return result
        except ListingAdmissionError as exc:
            outcome = exc.code
            if exc.kind.is_fault():
                log.error("listing_admission_fault", reason=exc.message)
            else:
                log.info("listing_rejected", code=exc.code, reason=exc.message)
            raise
        except Exception as exc:
            log.exception(
                "listing_admission_failed",
                error_type=type(exc).__name__,
            )
            raise AdmissionInternalError() from exc
        finally:
            if self._metrics is not None:
                self._metrics.record_admission(
                    outcome, self._time.monotonic() - started
                )

    async def _admit(
        self,
        seller_id: UUID,
        submission: ListingSubmission,
        log: structlog.BoundLogger,
    ) -> AdmissionResult:
        # Step 1: Shape validation, before touching any store
        validated = validate_submission_shape(submission, self._config)
        log = log.bind(event_id=validated.event_id)

        # Step 2: Seller rate over the trailing window
        await self._check_rate_limit(seller_id)

        # Step 3: Event must exist, be active and lie in the future
        event = await self._require_listable_event(validated.event_id)

        # Step 4: Price cap against the base price
        self._check_price_cap(validated.selling_price, event)

        # Step 5: Fingerprint once, before any trust decision
        fingerprint = compute_fingerprint(validated.proof_text)
        log = log.bind(fingerprint=display_fingerprint(fingerprint))
        await self._ledger.ensure_not_listed(fingerprint)

        # Step 6: Classify, verify, then lifecycle check or screening
        payload = classify_payload(validated.proof_text)
        assessment = self._verifier.verify(payload)
        await self._registry_lookup.check(payload, assessment)
        log.debug(
            "ticket_proof_accepted",
            payload_kind=assessment.payload_kind,
            cryptographically_verified=assessment.cryptographically_verified,
        )

        # Step 7: Notes
        notes = sanitize_notes(validated.notes)

        # Step 8: Persist; the store's unique fingerprint is the final guard
        now = self._time.utcnow()
        record = ListingRecord(
            id=uuid4(),
            event_id=validated.event_id,
            seller_id=seller_id,
            original_price=event.base_price if event.base_price is not None else 0.0,
            selling_price=validated.selling_price,
            quantity=validated.quantity,
            notes=notes,
            fingerprint=fingerprint,
            status=ListingStatus.AVAILABLE,
            cryptographically_verified=assessment.cryptographically_verified,
            created_at=now,
            updated_at=now,
        )
        try:
            stored = await self._listings.insert(record)
        except DuplicateFingerprintError:
            # Another submission of the same ticket won the insert race
            log.warning("duplicate_fingerprint_constraint_violation")
            raise AlreadyListedError() from None

        log.info(
            "listing_admitted",
            listing_id=str(stored.id),
            payload_kind=assessment.payload_kind,
            cryptographically_verified=stored.cryptographically_verified,
        )
        return AdmissionResult(listing=stored, payload_kind=assessment.payload_kind)

    async def _check_rate_limit(self, seller_id: UUID) -> None:
        window_minutes = self._config.rate_limit_window_minutes
        since = self._time.utcnow() - timedelta(minutes=window_minutes)
        recent = await self._listings.count_recent_by_seller(seller_id, since)
        if recent >= self._config.rate_limit_per_window:
            raise RateLimitExceededError(
                seller_id=seller_id,
                current_count=recent,
                limit=self._config.rate_limit_per_window,
                window_minutes=window_minutes,
            )

    async def _require_listable_event(self, event_id: str) -> EventRecord:
        event = await self._events.get(event_id)
        if event is None:
            raise InvalidFormatError(EVENT_NOT_FOUND_MESSAGE)
        if not event.is_active:
            raise ExpiredError(EVENT_INACTIVE_MESSAGE)
        if event.is_past(self._time.utcnow()):
            raise ExpiredError(EVENT_PAST_MESSAGE)
        return event

    def _check_price_cap(self, selling_price: float, event: EventRecord) -> None:
        if event.base_price is None:
            return
        cap = event.base_price + self._config.price_cap_delta
        if selling_price > cap:
            raise InvalidFormatError(
                f"Selling price cannot exceed €{cap:.2f} "
                f"(original price + €{_format_amount(self._config.price_cap_delta)})"
            )
