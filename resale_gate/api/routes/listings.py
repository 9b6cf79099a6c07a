"""Listing admission endpoint.

``POST /v1/listings`` is the only way a listing enters the marketplace.
Every rejection is a ``{code, message}`` body with the status of its kind:

    INVALID_FORMAT, UNKNOWN_TICKET, ALREADY_USED, CANCELLED, EXPIRED -> 400
    ALREADY_LISTED -> 409
    RATE_LIMITED   -> 429 with Retry-After
    INTERNAL_ERROR -> 500 (also on admission timeout)
"""

import asyncio
from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from structlog import get_logger

from resale_gate.api.auth.seller_auth import get_seller_id
from resale_gate.api.dependencies.listing_admission import (
    get_listing_admission_service,
)
from resale_gate.api.error_handlers import admission_error_response
from resale_gate.api.models.listing import (
    AdmissionErrorResponse,
    CreateListingRequest,
    CreateListingResponse,
    ListingModel,
)
from resale_gate.application.services.listing_admission_service import (
    ListingAdmissionService,
)
from resale_gate.domain.errors import AdmissionInternalError, ListingAdmissionError

router = APIRouter(prefix="/v1", tags=["listings"])

logger = get_logger()


@router.post(
    "/listings",
    response_model=CreateListingResponse,
    status_code=201,
    responses={
        400: {"model": AdmissionErrorResponse, "description": "Listing rejected"},
        401: {"model": AdmissionErrorResponse, "description": "No seller identity"},
        409: {"model": AdmissionErrorResponse, "description": "Ticket already listed"},
        429: {"model": AdmissionErrorResponse, "description": "Seller rate limited"},
        500: {"model": AdmissionErrorResponse, "description": "Internal error"},
    },
    summary="List a ticket for resale",
)
async def create_listing(
    request_data: CreateListingRequest,
    seller_id: UUID = Depends(get_seller_id),
    service: ListingAdmissionService = Depends(get_listing_admission_service),
) -> CreateListingResponse | JSONResponse:
    """Admit or reject a proposed listing for the authenticated seller."""
    try:
        result = await asyncio.wait_for(
            service.admit(seller_id, request_data.to_submission()),
            timeout=service.config.request_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error(
            "listing_admission_timeout",
            seller_id=str(seller_id),
            timeout_seconds=service.config.request_timeout_seconds,
        )
        return admission_error_response(AdmissionInternalError())
    except ListingAdmissionError as exc:
        return admission_error_response(exc)

    return CreateListingResponse(
        code=result.code,
        listing=ListingModel.from_record(result.listing),
    )
