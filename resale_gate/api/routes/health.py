"""Health check endpoint."""

from fastapi import APIRouter, Depends

from resale_gate.api.dependencies.listing_admission import get_admission_config
from resale_gate.api.models.health import HealthResponse
from resale_gate.config.admission_config import AdmissionConfig

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    config: AdmissionConfig = Depends(get_admission_config),
) -> HealthResponse:
    """Return health status and the ticket verification mode."""
    return HealthResponse(
        status="healthy",
        verification_mode=config.verification_mode.value,
    )
