"""Correlation ID tracking across one admission request.

The API middleware stores the request's correlation ID in a context variable
so every log line emitted while admitting a listing (classifier, verifier,
ledger, store adapters) carries the same ID without threading it through
call signatures.

Usage:
    correlation_id = request.headers.get("X-Correlation-ID") or generate_correlation_id()
    set_correlation_id(correlation_id)
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Empty string means "no request in scope"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Return a fresh UUID4 string."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the correlation ID of the current context, or ``""``."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind ``correlation_id`` to the current context.

    Args:
        correlation_id: ID taken from the request header or freshly generated.
    """
    _correlation_id.set(correlation_id)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor that stamps the current correlation ID.

    Args:
        logger: Unused, required by the processor signature.
        method_name: Unused, required by the processor signature.
        event_dict: Event being rendered.

    Returns:
        The event with ``correlation_id`` added when one is in scope.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
