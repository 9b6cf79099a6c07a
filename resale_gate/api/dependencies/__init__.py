"""FastAPI dependency providers."""

from resale_gate.api.dependencies.listing_admission import (
    get_admission_config,
    get_listing_admission_service,
)

__all__: list[str] = ["get_admission_config", "get_listing_admission_service"]
