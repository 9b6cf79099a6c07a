"""Prometheus scrape endpoint for admission metrics."""

from fastapi import APIRouter, Response

from resale_gate.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    generate_metrics,
)

router = APIRouter(prefix="/v1", tags=["metrics"])


@router.get(
    "/metrics",
    summary="Prometheus metrics endpoint",
    description="Admission outcomes, latency and uptime in Prometheus exposition format.",
    response_class=Response,
    responses={
        200: {
            "description": "Metrics in Prometheus format",
            "content": {"text/plain": {}},
        }
    },
)
async def get_metrics() -> Response:
    """Get operational metrics in Prometheus format."""
    return Response(content=generate_metrics(), media_type=METRICS_CONTENT_TYPE)
