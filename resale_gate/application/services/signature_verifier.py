"""Cryptographic verification of signed ticket proofs.

Two signed formats are accepted, both keyed with the deployment's ticket
signing secret:

- Signed token: ``header.payload.signature``, base64url segments, HMAC-SHA256
  over ``header "." payload`` (HS256). The payload is a JSON object of claims.
- Signed structured payload: a JSON object whose ``sig`` field is the hex
  HMAC-SHA256 of the remaining fields in canonical form (sorted keys, compact
  separators, UTF-8).

Verification mode:
    ENFORCED: signatures must verify; a mismatch is INVALID_FORMAT.
    DEGRADED_ACCEPT_ALL: no secret is configured. Signed payloads are passed
        through unverified and listings rely on deduplication alone.

Tokens are decoded with PyJWT. Token expiry is checked against the injected
time authority rather than the wall clock, so PyJWT's own time claim checks
are switched off. Structured signatures are compared in constant time
(hmac.compare_digest). Unverified payload classes never reach HMAC
computation.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import math
from typing import Any, Mapping

import jwt
from jwt.utils import base64url_decode, base64url_encode

from resale_gate.application.ports.time_authority import TimeAuthorityProtocol
from resale_gate.application.services.base import LoggingMixin
from resale_gate.config.admission_config import AdmissionConfig
from resale_gate.domain.errors import (
    AdmissionConfigurationError,
    ExpiredError,
    InvalidFormatError,
)
from resale_gate.domain.models.ticket_payload import (
    SignedStructuredPayload,
    SignedTokenPayload,
    TicketPayload,
)
from resale_gate.domain.models.verification import TrustAssessment, VerificationMode
from resale_gate.infrastructure.adapters.time.system_time_authority import (
    SystemTimeAuthority,
)

SUPPORTED_TOKEN_ALGORITHM = "HS256"
TICKET_REFERENCE_CLAIMS = ("tid", "sub", "ticket_id")

INVALID_SIGNATURE_MESSAGE = "Invalid ticket signature - this ticket may be fraudulent"
MALFORMED_TOKEN_MESSAGE = "Ticket token is malformed"
UNSUPPORTED_ALGORITHM_MESSAGE = "Ticket token uses an unsupported signing algorithm"
TOKEN_EXPIRED_MESSAGE = "This ticket token has expired"

# Expiry uses the injected clock; audience is not bound to a listing.
_TOKEN_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
}


def is_canonical_signature_segment(segment: str) -> bool:
    """Whether ``segment`` is the one base64url spelling of its bytes.

    The last character of an unpadded segment can carry unused bits, so
    several spellings decode to the same signature. Only the canonical one
    is accepted, keeping one ticket to one proof fingerprint.
    """
    try:
        decoded = base64url_decode(segment)
    except ValueError:
        return False
    return base64url_encode(decoded).decode("ascii") == segment


def canonical_json_bytes(fields: Mapping[str, Any]) -> bytes:
    """Canonical serialization signed by structured payload signatures."""
    return json.dumps(
        dict(fields),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def hmac_sha256(secret: str, message: bytes) -> bytes:
    """Raw HMAC-SHA256 of ``message`` keyed with ``secret``."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def sign_structured_payload(fields: Mapping[str, Any], secret: str) -> str:
    """Produce signed structured proof text for ``fields``.

    The ``sig`` field is computed over the canonical form of ``fields`` so
    SignatureVerifier accepts the result as long as the same secret is used.

    Args:
        fields: Ticket fields. Must not already contain ``sig``.
        secret: Ticket signing secret.

    Returns:
        JSON text with the fields and a hex ``sig`` field.

    Raises:
        ValueError: If ``fields`` already carries a ``sig`` field.
    """
    if "sig" in fields:
        raise ValueError("fields must not already contain a 'sig' entry")
    signature = hmac_sha256(secret, canonical_json_bytes(fields)).hex()
    return json.dumps(
        {**dict(fields), "sig": signature},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def extract_ticket_reference(claims: Mapping[str, Any]) -> str | None:
    """First non-empty string among the ``tid``, ``sub`` and ``ticket_id`` claims."""
    for claim in TICKET_REFERENCE_CLAIMS:
        value = claims.get(claim)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class SignatureVerifier(LoggingMixin):
    """Verifies signed ticket proofs against the ticket signing secret.

    Usage:
        verifier = SignatureVerifier.from_config(config)
        assessment = verifier.verify(classify_payload(qr_text))
        if assessment.cryptographically_verified: ...
    """

    def __init__(
        self,
        signing_secret: str | None,
        mode: VerificationMode | None = None,
        time_authority: TimeAuthorityProtocol | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            signing_secret: HMAC secret, None or empty for degraded mode.
            mode: Explicit mode. Derived from ``signing_secret`` when None.
            time_authority: Clock for token expiry. Defaults to system time.

        Raises:
            AdmissionConfigurationError: ENFORCED mode without a secret.
        """
        self._secret = signing_secret or None
        if mode is None:
            mode = (
                VerificationMode.ENFORCED
                if self._secret
                else VerificationMode.DEGRADED_ACCEPT_ALL
            )
        if mode is VerificationMode.ENFORCED and not self._secret:
            raise AdmissionConfigurationError(
                "ENFORCED verification requires a ticket signing secret"
            )
        self._mode = mode
        self._time = time_authority or SystemTimeAuthority()
        self._init_logger(component="verification")

    @classmethod
    def from_config(
        cls,
        config: AdmissionConfig,
        time_authority: TimeAuthorityProtocol | None = None,
    ) -> SignatureVerifier:
        """Build a verifier from the admission configuration."""
        return cls(
            signing_secret=config.signing_secret,
            mode=config.verification_mode,
            time_authority=time_authority,
        )

    @property
    def mode(self) -> VerificationMode:
        return self._mode

    @property
    def is_enforced(self) -> bool:
        return self._mode is VerificationMode.ENFORCED

    def _signing_key(self) -> str:
        if self._secret is None:
            raise AdmissionConfigurationError("No ticket signing secret configured")
        return self._secret

    def verify(self, payload: TicketPayload) -> TrustAssessment:
        """Decide the cryptographic trust of a classified payload.

        Args:
            payload: Output of ``classify_payload``.

        Returns:
            TrustAssessment. ``cryptographically_verified`` is True only
            when a signature check passed.

        Raises:
            InvalidFormatError: Signature mismatch, malformed token or
                unsupported algorithm.
            ExpiredError: Token ``exp`` claim is in the past.
        """
        if isinstance(payload, SignedTokenPayload):
            if not self.is_enforced:
                return TrustAssessment(payload.kind.value, False)
            return self._verify_token(payload)

        if isinstance(payload, SignedStructuredPayload):
            if not self.is_enforced:
                return TrustAssessment(payload.kind.value, False)
            return self._verify_structured(payload)

        return TrustAssessment(payload.kind.value, False)

    def _verify_token(self, payload: SignedTokenPayload) -> TrustAssessment:
        log = self._log_operation("verify_token")

        if not is_canonical_signature_segment(payload.signature_segment):
            log.info("token_signature_not_canonical")
            raise InvalidFormatError(INVALID_SIGNATURE_MESSAGE)

        try:
            claims = jwt.decode(
                payload.raw,
                self._signing_key(),
                algorithms=[SUPPORTED_TOKEN_ALGORITHM],
                options=_TOKEN_DECODE_OPTIONS,
            )
        except jwt.InvalidSignatureError:
            log.info("token_signature_mismatch")
            raise InvalidFormatError(INVALID_SIGNATURE_MESSAGE) from None
        except jwt.InvalidAlgorithmError:
            log.info("token_algorithm_rejected")
            raise InvalidFormatError(UNSUPPORTED_ALGORITHM_MESSAGE) from None
        except jwt.InvalidTokenError as exc:
            log.info("token_undecodable", reason=type(exc).__name__)
            raise InvalidFormatError(MALFORMED_TOKEN_MESSAGE) from None
        except RecursionError:
            log.info("token_undecodable", reason="nesting_too_deep")
            raise InvalidFormatError(MALFORMED_TOKEN_MESSAGE) from None

        exp = claims.get("exp")
        if _is_finite_number(exp):
            if exp < self._time.utcnow().timestamp():
                log.info("token_expired")
                raise ExpiredError(TOKEN_EXPIRED_MESSAGE)

        reference = extract_ticket_reference(claims)
        log.debug("token_verified", has_reference=reference is not None)
        return TrustAssessment(payload.kind.value, True, reference)

    def _verify_structured(self, payload: SignedStructuredPayload) -> TrustAssessment:
        log = self._log_operation("verify_structured")

        try:
            presented = bytes.fromhex(payload.signature_hex)
        except ValueError:
            log.info("structured_signature_not_hex")
            raise InvalidFormatError(INVALID_SIGNATURE_MESSAGE) from None

        expected = hmac_sha256(
            self._signing_key(), canonical_json_bytes(payload.fields)
        )
        if not hmac.compare_digest(expected, presented):
            log.info("structured_signature_mismatch")
            raise InvalidFormatError(INVALID_SIGNATURE_MESSAGE)

        log.debug("structured_payload_verified")
        return TrustAssessment(payload.kind.value, True)
