"""API request/response models."""

from resale_gate.api.models.health import HealthResponse
from resale_gate.api.models.listing import (
    AdmissionErrorResponse,
    CreateListingRequest,
    CreateListingResponse,
    ListingModel,
)

__all__: list[str] = [
    "AdmissionErrorResponse",
    "CreateListingRequest",
    "CreateListingResponse",
    "HealthResponse",
    "ListingModel",
]
