"""Seller notes sanitization.

Notes are rendered to buyers, so markup and inline event handler
attributes are stripped before storage. The result is plain text of at most
1000 characters, or None when nothing is left.
"""

from __future__ import annotations

import re

from resale_gate.config.admission_config import MAX_NOTES_LENGTH

_TAG_PATTERN = re.compile(r"<[^>]*>")
_EVENT_HANDLER_PATTERN = re.compile(r"\bon\w+\s*=", re.IGNORECASE)


def sanitize_notes(notes: object) -> str | None:
    """Trim, truncate to 1000 characters and strip markup.

    Truncation happens before stripping, so the stored text may be shorter
    than 1000 characters but never longer.

    Args:
        notes: Raw notes value from the request. Non-strings are dropped.

    Returns:
        Sanitized notes, or None when empty.
    """
    if not isinstance(notes, str):
        return None
    trimmed = notes.strip()
    if not trimmed:
        return None
    cleaned = trimmed[:MAX_NOTES_LENGTH]
    cleaned = _TAG_PATTERN.sub("", cleaned)
    cleaned = _EVENT_HANDLER_PATTERN.sub("", cleaned)
    return cleaned or None
