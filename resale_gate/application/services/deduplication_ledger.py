"""One listing per ticket fingerprint.

The ledger answers "is this ticket already on the marketplace?" before any
listing is written. The lookup is advisory: two submissions of the same
ticket can both pass it, so the listing store's uniqueness constraint stays
the authoritative guard and its DuplicateFingerprintError is mapped to the
same ALREADY_LISTED outcome by the admission service.

Ledger outcomes:
    sold              -> ALREADY_LISTED ("already been sold")
    available/reserved -> ALREADY_LISTED ("already listed")
    no listing        -> proceed
"""

from __future__ import annotations

from resale_gate.application.ports.listing_store import ListingStoreProtocol
from resale_gate.application.services.base import LoggingMixin
from resale_gate.application.services.fingerprint_service import display_fingerprint
from resale_gate.domain.errors import AlreadyListedError
from resale_gate.domain.models.listing import ListingStatus


class DeduplicationLedger(LoggingMixin):
    """Rejects fingerprints that already back a stored listing."""

    def __init__(self, listing_store: ListingStoreProtocol) -> None:
        self._store = listing_store
        self._init_logger(component="dedup")

    async def ensure_not_listed(self, fingerprint: str) -> None:
        """Raise if ``fingerprint`` already backs a listing.

        Args:
            fingerprint: SHA-256 hex fingerprint of the trimmed proof.

        Raises:
            AlreadyListedError: A listing with this fingerprint exists.
        """
        log = self._log_operation(
            "ensure_not_listed", fingerprint=display_fingerprint(fingerprint)
        )
        existing = await self._store.find_by_fingerprint(fingerprint)
        if existing is None:
            log.debug("fingerprint_unseen")
            return

        already_sold = existing.status is ListingStatus.SOLD
        log.info(
            "fingerprint_already_listed",
            existing_status=existing.status.value,
        )
        raise AlreadyListedError(already_sold=already_sold)
