"""Advisory pre-check of ticket proof text.

Used by clients before submitting a listing: a quick length check and a
display-friendly summary of what the proof contains. Nothing here is a
security decision. Authenticity is decided by ListingAdmissionService.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from jwt.utils import base64url_decode

from resale_gate.application.services.payload_classifier import SIGNED_TOKEN_PATTERN
from resale_gate.config.admission_config import (
    MAX_PROOF_TEXT_LENGTH,
    MIN_UNSTRUCTURED_PROOF_LENGTH,
)


class ProofDisplayType(Enum):
    """How a proof is presented back to the seller."""

    JWT = "jwt"
    JSON = "json"
    PLAIN = "plain"


@dataclass(frozen=True)
class ProofPayloadSummary:
    """Display summary of a ticket proof.

    Attributes:
        raw: Trimmed proof text.
        type: Display type.
        fields: Top-level fields rendered as strings.
    """

    raw: str
    type: ProofDisplayType
    fields: dict[str, str] = field(default_factory=dict)


def is_proof_text_valid(text: str) -> bool:
    """Whether trimmed ``text`` is worth sending to the server (5..10,000 chars)."""
    length = len(text.strip())
    return MIN_UNSTRUCTURED_PROOF_LENGTH <= length <= MAX_PROOF_TEXT_LENGTH


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _stringify_fields(data: dict[str, Any]) -> dict[str, str]:
    return {str(key): _stringify(value) for key, value in data.items()}


def summarize_proof_payload(text: str) -> ProofPayloadSummary:
    """Best-effort decode of a proof for display.

    Tokens show their claims segment without any signature check (an
    undecodable claims segment yields no fields). JSON objects show their
    fields. Anything else is shown as a single ``value`` field.
    """
    raw = text.strip()

    if SIGNED_TOKEN_PATTERN.fullmatch(raw):
        try:
            claims = json.loads(base64url_decode(raw.split(".")[1]))
        except (ValueError, RecursionError):
            claims = None
        fields = _stringify_fields(claims) if isinstance(claims, dict) else {}
        return ProofPayloadSummary(raw=raw, type=ProofDisplayType.JWT, fields=fields)

    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError):
        parsed = None
    if isinstance(parsed, dict):
        return ProofPayloadSummary(
            raw=raw, type=ProofDisplayType.JSON, fields=_stringify_fields(parsed)
        )

    return ProofPayloadSummary(
        raw=raw, type=ProofDisplayType.PLAIN, fields={"value": raw}
    )
