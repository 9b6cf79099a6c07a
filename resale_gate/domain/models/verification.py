"""Signature verification mode and per-payload trust outcome."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VerificationMode(Enum):
    """How the deployment treats signed payloads.

    Modes:
        ENFORCED: A signing secret is configured. Signed payloads must verify.
        DEGRADED_ACCEPT_ALL: No secret configured. Signed payloads are
            accepted without verification and flagged unverified. Listings
            are then protected by deduplication only.
    """

    ENFORCED = "ENFORCED"
    DEGRADED_ACCEPT_ALL = "DEGRADED_ACCEPT_ALL"


@dataclass(frozen=True)
class TrustAssessment:
    """Outcome of classifying and verifying one ticket proof.

    Attributes:
        payload_kind: Classification label value (e.g. "signed-token").
        cryptographically_verified: True only when a signature check passed.
        ticket_reference: Reference extracted from a verified token, if any.
    """

    payload_kind: str
    cryptographically_verified: bool
    ticket_reference: str | None = None
