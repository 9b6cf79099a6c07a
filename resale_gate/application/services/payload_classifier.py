"""Ticket proof payload classification.

Classification is the first step of every trust decision and is purely
syntactic: it never verifies anything and never raises.

Order of checks on the trimmed text:
1. Three base64url segments joined by dots: signed token.
2. Valid JSON decoding to an object: signed structured payload when the
   object has a string ``sig`` field, otherwise structured unverified.
3. Anything else (JSON parse failure, nesting too deep to parse, JSON list or
   scalar): unstructured.
"""

from __future__ import annotations

import json
import re
from typing import Any

from resale_gate.domain.models.ticket_payload import (
    SignedStructuredPayload,
    SignedTokenPayload,
    StructuredUnverifiedPayload,
    TicketPayload,
    UnstructuredPayload,
)

SIGNED_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")
SIGNATURE_FIELD = "sig"


def _parse_json_object(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    if isinstance(parsed, dict):
        return parsed
    return None


def classify_payload(proof_text: str) -> TicketPayload:
    """Classify a ticket proof into exactly one payload variant.

    Args:
        proof_text: Raw proof text. Surrounding whitespace is ignored.

    Returns:
        SignedTokenPayload, SignedStructuredPayload,
        StructuredUnverifiedPayload or UnstructuredPayload.
    """
    text = proof_text.strip()

    if SIGNED_TOKEN_PATTERN.fullmatch(text):
        header, payload, signature = text.split(".")
        return SignedTokenPayload(
            raw=text,
            header_segment=header,
            payload_segment=payload,
            signature_segment=signature,
        )

    fields = _parse_json_object(text)
    if fields is None:
        return UnstructuredPayload(raw=text)

    signature = fields.get(SIGNATURE_FIELD)
    if isinstance(signature, str):
        unsigned = {k: v for k, v in fields.items() if k != SIGNATURE_FIELD}
        return SignedStructuredPayload(raw=text, fields=unsigned, signature_hex=signature)

    return StructuredUnverifiedPayload(raw=text, fields=fields)
