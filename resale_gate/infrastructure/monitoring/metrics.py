"""Prometheus metrics for listing admission.

Operational metrics only: admission outcomes, admission latency, rate limit
activity and process uptime. No per-seller or per-ticket labels, so label
cardinality stays bounded by the outcome code set.

Exposed by ``GET /v1/metrics`` in Prometheus exposition format.
"""

import os
import threading
import time

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_collector_lock = threading.Lock()

# Admission is bounded by the request timeout (5s by default)
ADMISSION_LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)


class MetricsCollector:
    """Holds the admission metrics on a private registry.

    Attributes:
        listing_admissions_total: Counter of admission outcomes by code.
        listing_admission_duration_seconds: Admission latency histogram.
        listing_rate_limit_hits_total: Counter of RATE_LIMITED outcomes.
        uptime_seconds: Seconds since the API started.
        startup_times: Service name to startup timestamp.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Create the metrics on ``registry`` (a fresh one when omitted).

        Args:
            registry: Custom registry, used by tests for isolation.
        """
        self._registry = registry or CollectorRegistry()
        self.startup_times: dict[str, float] = {}
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "resale-gate-api")

        self.listing_admissions_total = Counter(
            name="listing_admissions_total",
            documentation="Listing admission decisions by outcome code",
            labelnames=["service", "environment", "outcome"],
            registry=self._registry,
        )

        self.listing_admission_duration_seconds = Histogram(
            name="listing_admission_duration_seconds",
            documentation="Time spent deciding one listing admission",
            labelnames=["service", "environment"],
            buckets=ADMISSION_LATENCY_BUCKETS,
            registry=self._registry,
        )

        self.listing_rate_limit_hits_total = Counter(
            name="listing_rate_limit_hits_total",
            documentation="Listing submissions rejected by the seller rate limit",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

        self.uptime_seconds = Gauge(
            name="uptime_seconds",
            documentation="Seconds since service start",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

    def record_admission(self, outcome: str, duration_seconds: float) -> None:
        """Record one admission decision.

        Args:
            outcome: ``"VALID"`` or an admission error code.
            duration_seconds: Time from receipt to decision.
        """
        self.listing_admissions_total.labels(
            service=self._service_name,
            environment=self._environment,
            outcome=outcome,
        ).inc()
        self.listing_admission_duration_seconds.labels(
            service=self._service_name,
            environment=self._environment,
        ).observe(duration_seconds)
        if outcome == "RATE_LIMITED":
            self.listing_rate_limit_hits_total.labels(
                service=self._service_name,
                environment=self._environment,
            ).inc()

    def record_startup(self, service: str) -> None:
        """Remember when ``service`` started, for the uptime gauge."""
        self.startup_times[service] = time.time()

    def get_uptime_seconds(self, service: str) -> float:
        """Seconds since ``service`` started, 0.0 if never recorded."""
        if service not in self.startup_times:
            return 0.0
        return time.time() - self.startup_times[service]

    def update_uptime_gauges(self) -> None:
        for service in self.startup_times:
            self.uptime_seconds.labels(
                service=service, environment=self._environment
            ).set(self.get_uptime_seconds(service))

    def get_registry(self) -> CollectorRegistry:
        return self._registry


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Return the process-wide collector, creating it on first use."""
    global _metrics_collector
    if _metrics_collector is None:
        with _collector_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def generate_metrics() -> bytes:
    """Render the process-wide collector in Prometheus text format."""
    collector = get_metrics_collector()
    collector.update_uptime_gauges()
    return generate_latest(collector.get_registry())


def reset_metrics_collector() -> None:
    """Drop the process-wide collector (tests only)."""
    global _metrics_collector
    with _collector_lock:
        _metrics_collector = None
