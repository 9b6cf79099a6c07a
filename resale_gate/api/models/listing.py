"""Listing API request/response models.

The request model is deliberately permissive: fields are typed ``Any`` and
optional so that wrong types and missing fields reach the admission service,
which answers with its own INVALID_FORMAT messages instead of a generic
schema error. Unknown fields (including any seller id) are ignored.
"""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from resale_gate.application.ports.listing_admission import ListingSubmission
from resale_gate.domain.models.listing import ListingRecord

DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class CreateListingRequest(BaseModel):
    """Body of ``POST /v1/listings``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event_id: Any = Field(default=None, alias="eventId")
    selling_price: Any = Field(default=None, alias="sellingPrice")
    quantity: Any = None
    notes: Any = None
    qr_text: Any = Field(default=None, alias="qrText")

    def to_submission(self) -> ListingSubmission:
        return ListingSubmission(
            event_id=self.event_id,
            selling_price=self.selling_price,
            qr_text=self.qr_text,
            quantity=self.quantity,
            notes=self.notes,
        )


class ListingModel(BaseModel):
    """Public view of a listing. The fingerprint is never exposed."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    event_id: str = Field(alias="eventId")
    seller_id: UUID = Field(alias="sellerId")
    original_price: float = Field(alias="originalPrice")
    selling_price: float = Field(alias="sellingPrice")
    quantity: int
    notes: str | None = None
    status: str
    cryptographically_verified: bool = Field(alias="cryptographicallyVerified")
    created_at: DateTimeWithZ = Field(alias="createdAt")
    updated_at: DateTimeWithZ = Field(alias="updatedAt")

    @classmethod
    def from_record(cls, record: ListingRecord) -> "ListingModel":
        return cls(
            id=record.id,
            event_id=record.event_id,
            seller_id=record.seller_id,
            original_price=record.original_price,
            selling_price=record.selling_price,
            quantity=record.quantity,
            notes=record.notes,
            status=record.status.value,
            cryptographically_verified=record.cryptographically_verified,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class CreateListingResponse(BaseModel):
    """201 body: ``{code: "VALID", listing}``."""

    code: str = "VALID"
    listing: ListingModel


class AdmissionErrorResponse(BaseModel):
    """Rejection body: one code, one user-facing message."""

    code: str
    message: str
