"""Unit tests for the health and metrics endpoints."""

from resale_gate.infrastructure.monitoring.metrics import reset_metrics_collector


def test_health(client) -> None:
    response = client.get("/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "verification_mode": "ENFORCED"}


def test_metrics(client) -> None:
    reset_metrics_collector()
    try:
        response = client.get("/v1/metrics")
    finally:
        reset_metrics_collector()

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "listing_admissions_total" in response.text
