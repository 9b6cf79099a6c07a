"""Exception handlers mapping failures to ``{code, message}`` bodies."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from structlog import get_logger

from resale_gate.api.auth.seller_auth import SellerAuthenticationError
from resale_gate.domain.errors import (
    AdmissionInternalError,
    InvalidFormatError,
    ListingAdmissionError,
)

INVALID_BODY_MESSAGE = "Request body must be valid JSON"

logger = get_logger()


def admission_error_response(exc: ListingAdmissionError) -> JSONResponse:
    """Render an admission error, adding Retry-After when rate limited."""
    headers: dict[str, str] | None = None
    retry_after = getattr(exc, "retry_after_seconds", None)
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response_dict(),
        headers=headers,
    )


async def _handle_admission_error(
    request: Request, exc: ListingAdmissionError
) -> JSONResponse:
    return admission_error_response(exc)


async def _handle_seller_authentication(
    request: Request, exc: SellerAuthenticationError
) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content=InvalidFormatError(exc.message).to_response_dict(),
    )


async def _handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info(
        "request_validation_failed",
        path=request.url.path,
        error_count=len(exc.errors()),
    )
    return JSONResponse(
        status_code=400,
        content=InvalidFormatError(INVALID_BODY_MESSAGE).to_response_dict(),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_request_error",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return admission_error_response(AdmissionInternalError())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on ``app``."""
    app.add_exception_handler(ListingAdmissionError, _handle_admission_error)
    app.add_exception_handler(SellerAuthenticationError, _handle_seller_authentication)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
