"""Ticket proof payload variants.

Raw scanned or pasted ticket text is classified into exactly one of four
shapes before any trust decision is made. Each variant carries only the data
relevant to its trust level, so downstream code switches on the variant type
instead of probing arbitrary JSON fields.

Variants:
    SignedTokenPayload: three base64url segments (header.payload.signature).
    SignedStructuredPayload: JSON object carrying a string ``sig`` field.
    StructuredUnverifiedPayload: JSON object without a signature.
    UnstructuredPayload: anything else, treated as an opaque string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union


class PayloadKind(Enum):
    """Classification label for a ticket proof payload."""

    SIGNED_TOKEN = "signed-token"
    SIGNED_STRUCTURED = "signed-structured"
    STRUCTURED_UNVERIFIED = "structured-unverified"
    UNSTRUCTURED = "unstructured"


def _frozen_mapping(data: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(data))


@dataclass(frozen=True)
class SignedTokenPayload:
    """Three-segment signed token.

    Attributes:
        raw: The trimmed token text.
        header_segment: base64url header segment.
        payload_segment: base64url claims segment.
        signature_segment: base64url signature segment.
    """

    raw: str
    header_segment: str
    payload_segment: str
    signature_segment: str

    kind = PayloadKind.SIGNED_TOKEN

    @property
    def signing_input(self) -> str:
        """The exact text the signature covers."""
        return f"{self.header_segment}.{self.payload_segment}"


@dataclass(frozen=True)
class SignedStructuredPayload:
    """JSON object carrying a hex HMAC in its ``sig`` field.

    Attributes:
        raw: The trimmed JSON text.
        fields: All fields except ``sig``.
        signature_hex: The claimed hex signature.
    """

    raw: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    signature_hex: str = ""

    kind = PayloadKind.SIGNED_STRUCTURED

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _frozen_mapping(self.fields))


@dataclass(frozen=True)
class StructuredUnverifiedPayload:
    """JSON object with no signature.

    Attributes:
        raw: The trimmed JSON text.
        fields: The parsed mapping.
    """

    raw: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    kind = PayloadKind.STRUCTURED_UNVERIFIED

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _frozen_mapping(self.fields))


@dataclass(frozen=True)
class UnstructuredPayload:
    """Opaque ticket string (plain QR text, barcode number, etc.)."""

    raw: str

    kind = PayloadKind.UNSTRUCTURED


TicketPayload = Union[
    SignedTokenPayload,
    SignedStructuredPayload,
    StructuredUnverifiedPayload,
    UnstructuredPayload,
]
