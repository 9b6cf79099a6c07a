"""Seller identity from the upstream authentication layer.

The session is authenticated before requests reach this service; the
upstream layer forwards the seller's id in X-Seller-Id. Seller fields in the
request body are never trusted.
"""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Header

from resale_gate.domain.exceptions import ResaleGateError

logger = structlog.get_logger(__name__)

SELLER_ID_HEADER = "X-Seller-Id"
AUTHENTICATION_REQUIRED_MESSAGE = "Authentication required"
INVALID_SELLER_ID_MESSAGE = "Invalid seller identity"


class SellerAuthenticationError(ResaleGateError):
    """The request carries no usable seller identity (HTTP 401)."""

    def __init__(self, message: str = AUTHENTICATION_REQUIRED_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


def get_seller_id(
    x_seller_id: Annotated[
        str | None,
        Header(description="Authenticated seller id (UUID), set by the auth layer."),
    ] = None,
) -> UUID:
    """Resolve the authenticated seller.

    Raises:
        SellerAuthenticationError: Header missing or not a UUID.
    """
    if not x_seller_id or not x_seller_id.strip():
        logger.info("seller_auth_missing_header")
        raise SellerAuthenticationError()
    try:
        return UUID(x_seller_id.strip())
    except ValueError:
        logger.info("seller_auth_invalid_header")
        raise SellerAuthenticationError(INVALID_SELLER_ID_MESSAGE) from None
