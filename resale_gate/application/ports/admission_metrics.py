"""Admission metrics port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AdmissionMetricsProtocol(Protocol):
    """Sink for admission outcome metrics.

    Implemented by the Prometheus MetricsCollector.
    """

    def record_admission(self, outcome: str, duration_seconds: float) -> None:
        """Record one admission decision and how long it took."""
        ...
