"""Structured logging and correlation ID propagation.

Usage:
    from resale_gate.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")
"""

from resale_gate.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from resale_gate.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_component,
)

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger_for_component",
    "set_correlation_id",
]
