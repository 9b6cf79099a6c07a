"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        verification_mode: ENFORCED or DEGRADED_ACCEPT_ALL.
    """

    status: str
    verification_mode: str
