"""Ticket fingerprinting.

A ticket fingerprint is the lowercase SHA-256 hex digest of the trimmed
ticket proof text, UTF-8 encoded. It is the deduplication identity of a
ticket: the same proof always yields the same fingerprint, whatever trust
class the proof falls into.

Fingerprints are never returned to API clients. Logs use the display-safe
form produced by ``display_fingerprint``.

Usage:
    fingerprint = compute_fingerprint(raw_qr_text)
    log.info("dedup_check", fingerprint=display_fingerprint(fingerprint))
"""

from __future__ import annotations

import hashlib
import hmac

FINGERPRINT_HEX_LENGTH = 64
DISPLAY_PREFIX_LENGTH = 16


def normalize_proof_text(raw_text: str) -> str:
    """Trim surrounding whitespace. Applied before hashing everywhere."""
    return raw_text.strip()


def compute_fingerprint(raw_text: str) -> str:
    """Return the SHA-256 hex fingerprint of the trimmed proof text.

    Args:
        raw_text: Ticket proof exactly as submitted.

    Returns:
        64-character lowercase hex digest.
    """
    normalized = normalize_proof_text(raw_text)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def display_fingerprint(fingerprint: str) -> str:
    """Display-safe form for logs: first 16 hex characters plus ``...``."""
    return f"{fingerprint[:DISPLAY_PREFIX_LENGTH]}..."


def fingerprint_matches(raw_text: str, expected: str) -> bool:
    """Constant-time check that ``raw_text`` hashes to ``expected``.

    Raises:
        ValueError: If ``expected`` is not a 64-character digest.
    """
    if len(expected) != FINGERPRINT_HEX_LENGTH:
        raise ValueError(
            f"Fingerprint must be {FINGERPRINT_HEX_LENGTH} hex characters, "
            f"got {len(expected)}"
        )
    return hmac.compare_digest(compute_fingerprint(raw_text), expected.lower())
