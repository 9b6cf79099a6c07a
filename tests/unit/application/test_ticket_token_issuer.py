"""Unit tests for TicketTokenIssuer."""

import re
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from resale_gate.application.ports.ticket_registry import TicketIssuanceRegistryProtocol
from resale_gate.application.services.payload_classifier import classify_payload
from resale_gate.application.services.signature_verifier import SignatureVerifier
from resale_gate.application.services.ticket_token_issuer import (
    TOKEN_AUDIENCE,
    TOKEN_ISSUER,
    TicketTokenIssuer,
)
from resale_gate.config.admission_config import TEST_SIGNING_SECRET
from resale_gate.domain.errors import AdmissionConfigurationError, ExpiredError
from resale_gate.domain.models.ticket_lifecycle import TicketLifecycleState
from resale_gate.infrastructure.stubs.ticket_registry_stub import TicketRegistryStub
from tests.helpers.constants import EVENT_ID, FROZEN_NOW

EVENT_DATE = FROZEN_NOW + timedelta(days=10)


def test_issued_token_verifies(token_issuer, fake_time_authority) -> None:
    issued = token_issuer.issue(EVENT_ID, "holder-7", EVENT_DATE)
    verifier = SignatureVerifier(TEST_SIGNING_SECRET, time_authority=fake_time_authority)

    assessment = verifier.verify(classify_payload(issued.token))

    assert assessment.cryptographically_verified is True
    assert assessment.ticket_reference == issued.ticket_number


def test_claims(token_issuer) -> None:
    issued = token_issuer.issue(EVENT_ID, "holder-7", EVENT_DATE)

    claims = jwt.decode(issued.token, options={"verify_signature": False})

    assert claims["tid"] == issued.ticket_number
    assert claims["ticket_number"] == issued.ticket_number
    assert claims["event_id"] == EVENT_ID
    assert claims["sub"] == "holder-7"
    assert claims["iss"] == TOKEN_ISSUER
    assert claims["aud"] == TOKEN_AUDIENCE
    assert claims["iat"] == int(FROZEN_NOW.timestamp())
    assert claims["exp"] == int((EVENT_DATE + timedelta(days=1)).timestamp())


def test_expiry_is_one_day_after_event(token_issuer) -> None:
    issued = token_issuer.issue(EVENT_ID, "holder-7", EVENT_DATE)

    assert issued.expires_at == EVENT_DATE + timedelta(days=1)


def test_naive_event_date_treated_as_utc(token_issuer) -> None:
    issued = token_issuer.issue(EVENT_ID, "holder-7", datetime(2026, 2, 1, 18, 0))

    assert issued.expires_at == datetime(2026, 2, 2, 18, 0, tzinfo=timezone.utc)


def test_ticket_number_format(token_issuer) -> None:
    number = token_issuer.generate_ticket_number("evt-ski-trip-2026")

    millis = int(FROZEN_NOW.timestamp() * 1000)
    assert re.fullmatch(rf"TIX-EVT-SKI--{millis}-[A-Z0-9]{{6}}", number)


def test_explicit_ticket_number_used(token_issuer) -> None:
    issued = token_issuer.issue(EVENT_ID, "holder-7", EVENT_DATE, ticket_number="TIX-42")

    assert issued.ticket_number == "TIX-42"


def test_reissued_tokens_differ(token_issuer) -> None:
    first = token_issuer.issue(EVENT_ID, "holder-7", EVENT_DATE, ticket_number="TIX-42")
    second = token_issuer.issue(EVENT_ID, "holder-7", EVENT_DATE, ticket_number="TIX-42")

    assert first.token != second.token


def test_key_id_in_header(fake_time_authority) -> None:
    issuer = TicketTokenIssuer(
        TEST_SIGNING_SECRET, time_authority=fake_time_authority, key_id="k1"
    )

    issued = issuer.issue(EVENT_ID, "holder-7", EVENT_DATE)

    header = jwt.get_unverified_header(issued.token)
    assert header == {"alg": "HS256", "typ": "JWT", "kid": "k1"}


def test_token_for_past_event_is_expired(token_issuer, fake_time_authority) -> None:
    issued = token_issuer.issue(EVENT_ID, "holder-7", FROZEN_NOW - timedelta(days=3))
    verifier = SignatureVerifier(TEST_SIGNING_SECRET, time_authority=fake_time_authority)

    with pytest.raises(ExpiredError):
        verifier.verify(classify_payload(issued.token))


def test_secret_required() -> None:
    with pytest.raises(AdmissionConfigurationError):
        TicketTokenIssuer("")


@pytest.fixture
def registering_issuer(fake_time_authority, ticket_registry) -> TicketTokenIssuer:
    return TicketTokenIssuer(
        TEST_SIGNING_SECRET,
        time_authority=fake_time_authority,
        registry=ticket_registry,
    )


async def test_issue_and_register_records_active_ticket(
    registering_issuer, ticket_registry
) -> None:
    issued = await registering_issuer.issue_and_register(EVENT_ID, "holder-7", EVENT_DATE)

    record = await ticket_registry.lookup(issued.ticket_number)
    assert record is not None
    assert record.state is TicketLifecycleState.ACTIVE


async def test_registry_record_carries_token(registering_issuer) -> None:
    issued = await registering_issuer.issue_and_register(EVENT_ID, "holder-7", EVENT_DATE)

    record = issued.to_registry_record()

    assert record.proof == issued.token
    assert record.holder_id == "holder-7"
    assert record.event_id == EVENT_ID
    assert record.nonce == issued.nonce
    assert record.status == "ACTIVE"


async def test_duplicate_ticket_number_rejected(registering_issuer) -> None:
    await registering_issuer.issue_and_register(
        EVENT_ID, "holder-7", EVENT_DATE, ticket_number="TIX-42"
    )

    with pytest.raises(ValueError, match="already registered"):
        await registering_issuer.issue_and_register(
            EVENT_ID, "holder-8", EVENT_DATE, ticket_number="TIX-42"
        )


async def test_register_requires_registry(token_issuer) -> None:
    with pytest.raises(AdmissionConfigurationError):
        await token_issuer.issue_and_register(EVENT_ID, "holder-7", EVENT_DATE)


def test_registry_stub_is_an_issuance_registry() -> None:
    assert isinstance(TicketRegistryStub(), TicketIssuanceRegistryProtocol)
