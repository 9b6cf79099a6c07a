"""structlog configuration for the resale gate.

Production renders one JSON object per line for log aggregation; any other
environment uses the colored console renderer.

Every admission log entry looks like:
    {
        "timestamp": "2025-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "listing_admitted",
        "correlation_id": "uuid",
        "service": "ListingAdmissionService",
        "component": "admission",
        ...operation context
    }

Raw ticket proof text and the signing secret are never passed to a logger.
Fingerprints appear only in their display-safe form.
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from resale_gate.infrastructure.observability.correlation import (
    correlation_id_processor,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Resolve ``LOG_LEVEL`` to a stdlib logging level, INFO if unrecognised."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog once at process startup.

    Args:
        environment: ``"production"`` selects JSON output, anything else the
            console renderer.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger_for_component(
    name: str, component: str = "admission"
) -> structlog.BoundLogger:
    """Return a logger pre-bound with ``service`` and ``component``.

    Used by module-level code (routes, adapters) that has no LoggingMixin.
    """
    return structlog.get_logger().bind(service=name, component=component)
