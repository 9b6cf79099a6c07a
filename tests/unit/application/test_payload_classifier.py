"""Unit tests for ticket proof classification."""

import json

import pytest

from resale_gate.application.services.payload_classifier import classify_payload
from resale_gate.domain.models.ticket_payload import (
    PayloadKind,
    SignedStructuredPayload,
    SignedTokenPayload,
    StructuredUnverifiedPayload,
    UnstructuredPayload,
)


class TestClassifyPayload:
    def test_three_segments_is_signed_token(self) -> None:
        payload = classify_payload("  aGVhZA.Ym9keQ.c2ln  ")

        assert isinstance(payload, SignedTokenPayload)
        assert payload.header_segment == "aGVhZA"
        assert payload.payload_segment == "Ym9keQ"
        assert payload.signature_segment == "c2ln"
        assert payload.signing_input == "aGVhZA.Ym9keQ"
        assert payload.kind is PayloadKind.SIGNED_TOKEN

    def test_object_with_string_sig_is_signed_structured(self) -> None:
        payload = classify_payload(json.dumps({"tid": "T-1", "sig": "abcd"}))

        assert isinstance(payload, SignedStructuredPayload)
        assert dict(payload.fields) == {"tid": "T-1"}
        assert payload.signature_hex == "abcd"

    def test_non_string_sig_is_unverified_structured(self) -> None:
        payload = classify_payload(json.dumps({"tid": "T-1", "sig": 12}))

        assert isinstance(payload, StructuredUnverifiedPayload)
        assert payload.fields["sig"] == 12

    def test_object_without_sig(self) -> None:
        payload = classify_payload('{"ticket_id": "T-9", "seat": "A1"}')

        assert isinstance(payload, StructuredUnverifiedPayload)
        assert payload.kind.value == "structured-unverified"

    @pytest.mark.parametrize(
        "text",
        [
            "QR-EBS-SKI-2025-001",
            "[1, 2, 3]",
            '"just a string"',
            "42",
            "{not json",
            "a.b",
            "a.b.c.d",
            "a.b+c.d",
        ],
    )
    def test_everything_else_is_unstructured(self, text: str) -> None:
        payload = classify_payload(text)

        assert isinstance(payload, UnstructuredPayload)
        assert payload.raw == text.strip()

    @pytest.mark.parametrize(
        "text",
        ["[" * 100_000 + "]" * 100_000, '{"a":' * 100_000 + "1" + "}" * 100_000],
    )
    def test_nesting_too_deep_to_parse_is_unstructured(self, text: str) -> None:
        payload = classify_payload(text)

        assert isinstance(payload, UnstructuredPayload)

    def test_fields_are_read_only(self) -> None:
        payload = classify_payload('{"ticket_id": "T-9"}')

        with pytest.raises(TypeError):
            payload.fields["ticket_id"] = "other"  # type: ignore[index]
