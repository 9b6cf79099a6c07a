"""Listing admission configuration.

This module defines the policy constants of the admission engine with
environment variable overrides for production tuning.

Policy:
- Selling price must be > 0 and <= max_price.
- With a known event base price, selling price must be <= base + price_cap_delta.
- Quantity is an integer in 1..max_quantity.
- A seller may create at most rate_limit_per_window listings per window.
- Without a signing secret the engine runs in DEGRADED_ACCEPT_ALL mode.

Environment Variables:
- TICKET_SIGNING_SECRET: HMAC-SHA256 secret shared with the ticket issuer
- TICKET_VERIFICATION_MODE: ENFORCED or DEGRADED_ACCEPT_ALL (default: derived
  from whether a secret is set)
- LISTING_PRICE_CAP_DELTA: Absolute cap above base price (default: 1.0)
- LISTING_MAX_PRICE: Maximum selling price (default: 10000)
- LISTING_MAX_QUANTITY: Maximum tickets per listing (default: 10)
- LISTING_RATE_LIMIT_PER_WINDOW: Listings per seller per window (default: 10)
- LISTING_RATE_LIMIT_WINDOW_MINUTES: Window size in minutes (default: 60)
- LISTING_REQUEST_TIMEOUT_SECONDS: Admission timeout at the API (default: 5.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from resale_gate.domain.errors import AdmissionConfigurationError
from resale_gate.domain.models.verification import VerificationMode

# Hard input bounds that are not deployment-tunable
MAX_PROOF_TEXT_LENGTH = 10_000
MIN_UNSTRUCTURED_PROOF_LENGTH = 5
MAX_NOTES_LENGTH = 1_000


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class AdmissionConfig:
    """Configuration for listing admission.

    All values can be overridden via environment variables for production tuning.

    Attributes:
        signing_secret: HMAC secret for ticket signatures. None means
            degraded mode.
        verification_mode: Explicit verification mode. Derived from
            signing_secret when not given.
        price_cap_delta: Absolute amount a seller may ask above base price.
        max_price: Upper bound for any selling price.
        max_quantity: Upper bound for tickets per listing.
        rate_limit_per_window: Max listings per seller per window.
        rate_limit_window_minutes: Sliding window size in minutes.
        request_timeout_seconds: Admission timeout applied at the API boundary.
    """

    signing_secret: str | None = field(default=None, repr=False)
    verification_mode: VerificationMode | None = None
    price_cap_delta: float = 1.0
    max_price: float = 10_000.0
    max_quantity: int = 10
    rate_limit_per_window: int = 10
    rate_limit_window_minutes: int = 60
    request_timeout_seconds: float = 5.0

    def __post_init__(self) -> None:
        """Validate configuration values and resolve the verification mode."""
        secret = self.signing_secret or None
        object.__setattr__(self, "signing_secret", secret)

        if self.verification_mode is None:
            mode = (
                VerificationMode.ENFORCED
                if secret
                else VerificationMode.DEGRADED_ACCEPT_ALL
            )
            object.__setattr__(self, "verification_mode", mode)
        elif self.verification_mode is VerificationMode.ENFORCED and not secret:
            raise AdmissionConfigurationError(
                "verification_mode ENFORCED requires TICKET_SIGNING_SECRET to be set"
            )

        if self.price_cap_delta < 0:
            raise AdmissionConfigurationError(
                f"price_cap_delta must be non-negative, got {self.price_cap_delta}"
            )
        if self.max_price <= 0:
            raise AdmissionConfigurationError(
                f"max_price must be positive, got {self.max_price}"
            )
        if self.max_quantity < 1:
            raise AdmissionConfigurationError(
                f"max_quantity must be at least 1, got {self.max_quantity}"
            )
        if self.rate_limit_per_window < 1:
            raise AdmissionConfigurationError(
                f"rate_limit_per_window must be positive, got {self.rate_limit_per_window}"
            )
        if self.rate_limit_window_minutes < 1:
            raise AdmissionConfigurationError(
                "rate_limit_window_minutes must be positive, "
                f"got {self.rate_limit_window_minutes}"
            )
        if self.request_timeout_seconds <= 0:
            raise AdmissionConfigurationError(
                "request_timeout_seconds must be positive, "
                f"got {self.request_timeout_seconds}"
            )

    @property
    def is_enforced(self) -> bool:
        """Whether signed payloads must verify."""
        return self.verification_mode is VerificationMode.ENFORCED

    @classmethod
    def from_environment(cls) -> AdmissionConfig:
        """Create config from environment variables with defaults.

        Returns:
            AdmissionConfig with values from environment or defaults.

        Raises:
            AdmissionConfigurationError: If TICKET_VERIFICATION_MODE is not a
                known mode, or ENFORCED is requested without a secret.
        """
        raw_mode = os.environ.get("TICKET_VERIFICATION_MODE", "").strip().upper()
        mode: VerificationMode | None = None
        if raw_mode:
            try:
                mode = VerificationMode(raw_mode)
            except ValueError:
                raise AdmissionConfigurationError(
                    f"Unknown TICKET_VERIFICATION_MODE: {raw_mode}"
                ) from None

        return cls(
            signing_secret=os.environ.get("TICKET_SIGNING_SECRET"),
            verification_mode=mode,
            price_cap_delta=_get_float_env("LISTING_PRICE_CAP_DELTA", 1.0),
            max_price=_get_float_env("LISTING_MAX_PRICE", 10_000.0),
            max_quantity=_get_int_env("LISTING_MAX_QUANTITY", 10),
            rate_limit_per_window=_get_int_env("LISTING_RATE_LIMIT_PER_WINDOW", 10),
            rate_limit_window_minutes=_get_int_env(
                "LISTING_RATE_LIMIT_WINDOW_MINUTES", 60
            ),
            request_timeout_seconds=_get_float_env(
                "LISTING_REQUEST_TIMEOUT_SECONDS", 5.0
            ),
        )


# Pre-defined configurations

# Default config: degraded mode until a secret is supplied
DEFAULT_ADMISSION_CONFIG = AdmissionConfig()

# Testing config with a fixed signing secret
TEST_SIGNING_SECRET = "test-ticket-signing-secret"
TEST_ADMISSION_CONFIG = AdmissionConfig(signing_secret=TEST_SIGNING_SECRET)
