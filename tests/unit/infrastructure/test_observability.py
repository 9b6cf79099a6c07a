"""Unit tests for correlation IDs and structlog configuration."""

import contextvars
from uuid import UUID

import pytest
import structlog

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


def test_generated_ids_are_uuids() -> None:
    first = generate_correlation_id()

    assert UUID(first)
    assert first != generate_correlation_id()


def test_correlation_id_is_context_local() -> None:
    def _inner() -> str:
        set_correlation_id("req-inner")
        return get_correlation_id()

    assert contextvars.copy_context().run(_inner) == "req-inner"
    assert get_correlation_id() != "req-inner"


def test_processor_stamps_current_id() -> None:
    def _run() -> dict:
        set_correlation_id("req-1")
        return correlation_id_processor(None, "info", {"event": "x"})

    event = contextvars.copy_context().run(_run)

    assert event["correlation_id"] == "req-1"


def test_processor_without_request_in_scope() -> None:
    event = contextvars.Context().run(
        correlation_id_processor, None, "info", {"event": "x"}
    )

    assert "correlation_id" not in event


@pytest.mark.parametrize("environment", ["production", "development"])
def test_configure_structlog(environment: str, monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    try:
        configure_structlog(environment)
        log = get_logger_for_component("tests", component="admission")
        log.info("configured")
    finally:
        structlog.reset_defaults()


def test_component_logger_binds_context() -> None:
    with structlog.testing.capture_logs() as captured:
        get_logger_for_component("svc", component="persistence").info("hello")

    assert captured[0]["service"] == "svc"
    assert captured[0]["component"] == "persistence"
