"""Seller identity resolution."""

from resale_gate.api.auth.seller_auth import (
    SELLER_ID_HEADER,
    SellerAuthenticationError,
    get_seller_id,
)

__all__: list[str] = ["SELLER_ID_HEADER", "SellerAuthenticationError", "get_seller_id"]
