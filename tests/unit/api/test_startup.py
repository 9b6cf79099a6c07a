"""Unit tests for API startup hooks."""

import pytest
import structlog

from resale_gate.api.startup import (
    SERVICE_NAME,
    configure_logging,
    initialize_admission_dependencies,
    record_service_startup,
    validate_admission_configuration,
)
from resale_gate.bootstrap import listing_admission as bootstrap
from resale_gate.bootstrap.listing_admission import reset_listing_admission_dependencies
from resale_gate.domain.errors import AdmissionConfigurationError
from resale_gate.domain.models.verification import VerificationMode
from resale_gate.infrastructure.monitoring.metrics import (
    get_metrics_collector,
    reset_metrics_collector,
)


@pytest.fixture(autouse=True)
def _isolated(monkeypatch):
    for name in ("TICKET_SIGNING_SECRET", "TICKET_VERIFICATION_MODE", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    reset_listing_admission_dependencies()
    reset_metrics_collector()
    yield
    reset_listing_admission_dependencies()
    reset_metrics_collector()
    structlog.reset_defaults()


def test_degraded_mode_allowed() -> None:
    config = validate_admission_configuration()

    assert config.verification_mode is VerificationMode.DEGRADED_ACCEPT_ALL


def test_enforced_with_secret(monkeypatch) -> None:
    monkeypatch.setenv("TICKET_SIGNING_SECRET", "s3cret")

    config = validate_admission_configuration()

    assert config.verification_mode is VerificationMode.ENFORCED


def test_enforced_without_secret_fails(monkeypatch) -> None:
    monkeypatch.setenv("TICKET_VERIFICATION_MODE", "ENFORCED")

    with pytest.raises(AdmissionConfigurationError):
        validate_admission_configuration()


def test_unknown_mode_fails(monkeypatch) -> None:
    monkeypatch.setenv("TICKET_VERIFICATION_MODE", "TRUST_ME")

    with pytest.raises(AdmissionConfigurationError):
        validate_admission_configuration()


def test_dependencies_built_at_startup() -> None:
    initialize_admission_dependencies()

    assert bootstrap._listing_admission_service is not None


def test_unusable_database_fails_startup(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/resale")

    def _broken():
        raise RuntimeError("asyncpg not installed")

    monkeypatch.setattr(bootstrap, "_postgres_event_store", _broken)

    with pytest.raises(RuntimeError, match="asyncpg"):
        initialize_admission_dependencies()


def test_record_service_startup() -> None:
    record_service_startup()

    assert SERVICE_NAME in get_metrics_collector().startup_times


def test_configure_logging(monkeypatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")

    configure_logging()
