"""Startup hooks for the resale gate API.

1. Configure structured logging
2. Validate the admission configuration and log the verification mode
3. Build the admission stores, failing startup when PostgreSQL is unusable
4. Record service startup for uptime tracking

Usage:
    configure_logging()
    validate_admission_configuration()
    initialize_admission_dependencies()
    record_service_startup()
"""

import os

from structlog import get_logger

from resale_gate.bootstrap.listing_admission import (
    get_admission_config,
    get_listing_admission_service,
)
from resale_gate.config.admission_config import AdmissionConfig
from resale_gate.domain.errors import AdmissionConfigurationError
from resale_gate.domain.models.verification import VerificationMode
from resale_gate.infrastructure.monitoring.metrics import get_metrics_collector
from resale_gate.infrastructure.observability import configure_structlog

ENVIRONMENT_VAR = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "development"
SERVICE_NAME = "api"

logger = get_logger()


def configure_logging() -> None:
    """Configure structlog from ENVIRONMENT. Call before anything logs."""
    environment = os.getenv(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)
    configure_structlog(environment=environment)

    log = get_logger().bind(component="startup_logging")
    log.info("structured_logging_configured", environment=environment)


def validate_admission_configuration() -> AdmissionConfig:
    """Load the admission config, failing startup on invalid values.

    Degraded verification is allowed but always announced at warning level.

    Raises:
        AdmissionConfigurationError: Invalid environment configuration.
    """
    log = logger.bind(component="startup_validation")
    try:
        config = get_admission_config()
    except AdmissionConfigurationError as exc:
        log.critical("admission_configuration_invalid", error=str(exc))
        raise

    if config.verification_mode is VerificationMode.DEGRADED_ACCEPT_ALL:
        log.warning(
            "ticket_verification_degraded",
            verification_mode=config.verification_mode.value,
            message="TICKET_SIGNING_SECRET not set - signed tickets are not verified",
        )
    else:
        log.info(
            "ticket_verification_enforced",
            verification_mode=VerificationMode.ENFORCED.value,
        )
    log.info(
        "admission_configuration_loaded",
        price_cap_delta=config.price_cap_delta,
        max_price=config.max_price,
        max_quantity=config.max_quantity,
        rate_limit_per_window=config.rate_limit_per_window,
        rate_limit_window_minutes=config.rate_limit_window_minutes,
    )
    return config


def initialize_admission_dependencies() -> None:
    """Build the stores and the admission service before serving traffic.

    Raises:
        Exception: Whatever the PostgreSQL adapters raised when DATABASE_URL
            is set but unusable.
    """
    log = logger.bind(component="startup_dependencies")
    try:
        get_listing_admission_service()
    except Exception as exc:
        log.critical("admission_dependencies_unavailable", error=str(exc))
        raise
    log.info("admission_dependencies_ready")


def record_service_startup() -> None:
    """Record startup time for the uptime gauge."""
    get_metrics_collector().record_startup(SERVICE_NAME)
    logger.info("service_startup_recorded", service=SERVICE_NAME)
