"""Unit tests for SignatureVerifier."""

import hmac
import json
from datetime import datetime, timedelta, timezone
from hashlib import sha256

import jwt
import pytest
from jwt.utils import base64url_encode

from resale_gate.application.services.fingerprint_service import compute_fingerprint
from resale_gate.application.services.payload_classifier import classify_payload
from resale_gate.application.services.signature_verifier import (
    INVALID_SIGNATURE_MESSAGE,
    MALFORMED_TOKEN_MESSAGE,
    UNSUPPORTED_ALGORITHM_MESSAGE,
    SignatureVerifier,
    canonical_json_bytes,
    extract_ticket_reference,
    hmac_sha256,
    is_canonical_signature_segment,
    sign_structured_payload,
)
from resale_gate.config.admission_config import (
    DEFAULT_ADMISSION_CONFIG,
    TEST_ADMISSION_CONFIG,
    TEST_SIGNING_SECRET,
)
from resale_gate.domain.errors import (
    AdmissionConfigurationError,
    ExpiredError,
    InvalidFormatError,
)
from resale_gate.domain.models.verification import VerificationMode
from tests.helpers.fake_time_authority import FakeTimeAuthority

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
BASE64URL_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
)


def _segment(data: bytes) -> str:
    return base64url_encode(data).decode("ascii")


def make_token(claims: dict, secret: str = TEST_SIGNING_SECRET) -> str:
    return jwt.encode(claims, secret, algorithm="HS256")


def make_raw_token(header: dict, claims: dict, secret: str = TEST_SIGNING_SECRET) -> str:
    """Sign arbitrary header JSON, including headers PyJWT refuses to emit."""
    signing_input = (
        f"{_segment(json.dumps(header).encode())}.{_segment(json.dumps(claims).encode())}"
    )
    digest = hmac.new(secret.encode(), signing_input.encode(), sha256).digest()
    return f"{signing_input}.{_segment(digest)}"


@pytest.fixture
def clock() -> FakeTimeAuthority:
    return FakeTimeAuthority(frozen_at=NOW)


@pytest.fixture
def verifier(clock: FakeTimeAuthority) -> SignatureVerifier:
    return SignatureVerifier.from_config(TEST_ADMISSION_CONFIG, time_authority=clock)


class TestCanonicalSignatureSegment:
    def test_issued_signature_is_canonical(self) -> None:
        signature = make_token({"tid": "TIX-1"}).split(".")[2]

        assert is_canonical_signature_segment(signature)

    def test_unused_trailing_bits_not_canonical(self) -> None:
        # "AB" carries 4 unused bits; "AA" is the canonical spelling of b"\x00"
        assert is_canonical_signature_segment("AA")
        assert not is_canonical_signature_segment("AB")

    def test_impossible_length_not_canonical(self) -> None:
        assert not is_canonical_signature_segment("a")


class TestModes:
    def test_mode_derived_from_secret(self) -> None:
        assert SignatureVerifier("s").mode is VerificationMode.ENFORCED
        assert SignatureVerifier(None).mode is VerificationMode.DEGRADED_ACCEPT_ALL
        assert SignatureVerifier("").mode is VerificationMode.DEGRADED_ACCEPT_ALL

    def test_enforced_without_secret_is_a_startup_error(self) -> None:
        with pytest.raises(AdmissionConfigurationError):
            SignatureVerifier(None, mode=VerificationMode.ENFORCED)

    def test_degraded_mode_passes_signed_payloads_unverified(self) -> None:
        verifier = SignatureVerifier.from_config(DEFAULT_ADMISSION_CONFIG)
        token = make_token({"tid": "T-1"}, secret="some-other-secret")

        assessment = verifier.verify(classify_payload(token))

        assert assessment.cryptographically_verified is False
        assert assessment.payload_kind == "signed-token"
        assert assessment.ticket_reference is None


class TestSignedToken:
    def test_valid_token_verifies(self, verifier: SignatureVerifier) -> None:
        token = make_token({"tid": "TIX-1", "exp": int((NOW + timedelta(days=1)).timestamp())})

        assessment = verifier.verify(classify_payload(token))

        assert assessment.cryptographically_verified is True
        assert assessment.ticket_reference == "TIX-1"

    def test_audience_claim_does_not_block_verification(
        self, verifier: SignatureVerifier
    ) -> None:
        token = make_token({"tid": "TIX-1", "aud": "door-scanner"})

        assert verifier.verify(classify_payload(token)).cryptographically_verified

    def test_wrong_secret_rejected(self, verifier: SignatureVerifier) -> None:
        token = make_token({"tid": "TIX-1"}, secret="not-the-secret")

        with pytest.raises(InvalidFormatError) as exc_info:
            verifier.verify(classify_payload(token))
        assert exc_info.value.message == INVALID_SIGNATURE_MESSAGE

    def test_tampered_payload_rejected(self, verifier: SignatureVerifier) -> None:
        header, _, signature = make_token({"tid": "TIX-1"}).split(".")
        forged_payload = _segment(json.dumps({"tid": "TIX-2"}).encode("utf-8"))

        with pytest.raises(InvalidFormatError):
            verifier.verify(classify_payload(f"{header}.{forged_payload}.{signature}"))

    def test_flipped_payload_character_rejected(self, verifier: SignatureVerifier) -> None:
        header, payload, signature = make_token({"tid": "TIX-1"}).split(".")
        flipped = ("B" if payload[0] != "B" else "C") + payload[1:]

        with pytest.raises(InvalidFormatError):
            verifier.verify(classify_payload(f"{header}.{flipped}.{signature}"))

    def test_only_canonical_signature_spelling_verifies(
        self, verifier: SignatureVerifier
    ) -> None:
        token = make_token({"tid": "TIX-1"})
        prefix = token[:-1]
        fingerprints = set()

        for replacement in BASE64URL_ALPHABET:
            candidate = prefix + replacement
            try:
                assessment = verifier.verify(classify_payload(candidate))
            except InvalidFormatError:
                continue
            assert assessment.cryptographically_verified
            fingerprints.add(compute_fingerprint(candidate))

        assert fingerprints == {compute_fingerprint(token)}

    def test_expired_token(self, verifier: SignatureVerifier) -> None:
        token = make_token({"tid": "TIX-1", "exp": int((NOW - timedelta(seconds=1)).timestamp())})

        with pytest.raises(ExpiredError):
            verifier.verify(classify_payload(token))

    def test_expiry_follows_injected_clock(self, clock: FakeTimeAuthority) -> None:
        verifier = SignatureVerifier(TEST_SIGNING_SECRET, time_authority=clock)
        token = make_token({"tid": "TIX-1", "exp": int((NOW + timedelta(hours=1)).timestamp())})

        assert verifier.verify(classify_payload(token)).cryptographically_verified
        clock.advance(delta=timedelta(hours=2))
        with pytest.raises(ExpiredError):
            verifier.verify(classify_payload(token))

    def test_non_numeric_exp_ignored(self, verifier: SignatureVerifier) -> None:
        token = make_token({"tid": "TIX-1", "exp": "soon"})

        assert verifier.verify(classify_payload(token)).cryptographically_verified

    def test_unsupported_algorithm_rejected(self, verifier: SignatureVerifier) -> None:
        token = make_raw_token({"alg": "none"}, {"tid": "TIX-1"})

        with pytest.raises(InvalidFormatError) as exc_info:
            verifier.verify(classify_payload(token))
        assert exc_info.value.message == UNSUPPORTED_ALGORITHM_MESSAGE

    def test_missing_alg_rejected(self, verifier: SignatureVerifier) -> None:
        token = make_raw_token({"typ": "JWT"}, {"tid": "TIX-1"})

        with pytest.raises(InvalidFormatError):
            verifier.verify(classify_payload(token))

    def test_undecodable_header_rejected(self, verifier: SignatureVerifier) -> None:
        _, payload, signature = make_token({"tid": "TIX-1"}).split(".")

        with pytest.raises(InvalidFormatError):
            verifier.verify(classify_payload(f"bm90LWpzb24.{payload}.{signature}"))

    def test_deeply_nested_header_rejected(self, verifier: SignatureVerifier) -> None:
        header = _segment(b"[" * 3000)

        with pytest.raises(InvalidFormatError) as exc_info:
            verifier.verify(classify_payload(f"{header}.eyJ0aWQiOiJ4In0.c2ln"))
        assert exc_info.value.message == MALFORMED_TOKEN_MESSAGE

    def test_non_object_claims_rejected(self, verifier: SignatureVerifier) -> None:
        token = make_raw_token({"alg": "HS256", "typ": "JWT"}, ["TIX-1"])

        with pytest.raises(InvalidFormatError):
            verifier.verify(classify_payload(token))

    def test_verified_without_reference(self, verifier: SignatureVerifier) -> None:
        assessment = verifier.verify(classify_payload(make_token({"seat": "A1"})))

        assert assessment.cryptographically_verified is True
        assert assessment.ticket_reference is None


class TestSignedStructured:
    def test_signed_payload_verifies(self, verifier: SignatureVerifier) -> None:
        text = sign_structured_payload({"tid": "TIX-1", "seat": "A1"}, TEST_SIGNING_SECRET)

        assessment = verifier.verify(classify_payload(text))

        assert assessment.cryptographically_verified is True
        assert assessment.payload_kind == "signed-structured"

    def test_key_order_does_not_matter(self, verifier: SignatureVerifier) -> None:
        fields = {"seat": "A1", "tid": "TIX-1"}
        signature = hmac_sha256(TEST_SIGNING_SECRET, canonical_json_bytes(fields)).hex()
        text = json.dumps({"tid": "TIX-1", "sig": signature, "seat": "A1"}, indent=2)

        assert verifier.verify(classify_payload(text)).cryptographically_verified

    def test_modified_field_rejected(self, verifier: SignatureVerifier) -> None:
        signed = json.loads(sign_structured_payload({"tid": "TIX-1"}, TEST_SIGNING_SECRET))
        signed["tid"] = "TIX-2"

        with pytest.raises(InvalidFormatError):
            verifier.verify(classify_payload(json.dumps(signed)))

    def test_non_hex_signature_rejected(self, verifier: SignatureVerifier) -> None:
        with pytest.raises(InvalidFormatError):
            verifier.verify(classify_payload('{"tid": "TIX-1", "sig": "zz"}'))

    def test_sign_refuses_existing_sig(self) -> None:
        with pytest.raises(ValueError):
            sign_structured_payload({"sig": "x"}, TEST_SIGNING_SECRET)


class TestUnsignedPayloads:
    @pytest.mark.parametrize(
        "text", ["QR-EBS-SKI-2025-001", '{"ticket_id": "T-1", "seat": "A1"}']
    )
    def test_never_verified(self, verifier: SignatureVerifier, text: str) -> None:
        assert not verifier.verify(classify_payload(text)).cryptographically_verified


class TestExtractTicketReference:
    def test_claim_precedence(self) -> None:
        assert extract_ticket_reference({"sub": "S", "tid": "T"}) == "T"
        assert extract_ticket_reference({"sub": "S", "ticket_id": "I"}) == "S"
        assert extract_ticket_reference({"ticket_id": " I "}) == "I"

    def test_blank_or_non_string_claims_skipped(self) -> None:
        assert extract_ticket_reference({"tid": "  ", "sub": 5}) is None
