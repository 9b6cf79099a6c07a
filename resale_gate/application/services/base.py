"""Structured logging mixin shared by the admission services.

Usage:
    class DeduplicationLedger(LoggingMixin):
        def __init__(self, store: ListingStoreProtocol) -> None:
            self._store = store
            self._init_logger(component="dedup")

        async def check(self, fingerprint: str) -> None:
            log = self._log_operation("dedup_check", fingerprint=display(fingerprint))
            log.debug("dedup_lookup_started")
"""

import structlog

from resale_gate.infrastructure.observability.correlation import get_correlation_id


class LoggingMixin:
    """Gives a service a logger bound with its class name and component.

    Attributes:
        _log: Service-scoped structlog BoundLogger.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "admission") -> None:
        """Bind the service logger. Call from ``__init__``.

        Args:
            component: Log category (admission, verification, dedup, ...).
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Return a logger bound with the operation name and correlation ID.

        Args:
            operation: Operation being performed, e.g. ``"admit_listing"``.
            **context: Extra key/value pairs to bind.
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
