"""HS256 ticket token issuance for organizers.

Issued tokens are what SignatureVerifier checks at listing time: the same
secret, HS256 via PyJWT, and a ``tid`` claim that names the ticket in the
registry. ``issue_and_register`` also writes the ticket to the registry as
ACTIVE, which is what lets the token pass the lifecycle check.

Claims:
    tid: Ticket number (registry key, first reference claim read at listing)
    ticket_number: Same value, kept for scanner compatibility
    event_id: Event the ticket admits to
    sub: Ticket holder id
    nonce: Random per token, so re-issued tokens never collide
    iat / exp: Issue and expiry times (epoch seconds)
    iss / aud: Issuer and audience labels
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import uuid4

import jwt

from resale_gate.application.ports.ticket_registry import (
    TicketIssuanceRegistryProtocol,
)
from resale_gate.application.ports.time_authority import TimeAuthorityProtocol
from resale_gate.application.services.base import LoggingMixin
from resale_gate.application.services.signature_verifier import (
    SUPPORTED_TOKEN_ALGORITHM,
)
from resale_gate.domain.errors import AdmissionConfigurationError
from resale_gate.domain.models.issued_ticket import IssuedTicketRecord
from resale_gate.infrastructure.adapters.time.system_time_authority import (
    SystemTimeAuthority,
)

TOKEN_ISSUER = "resale-gate"
TOKEN_AUDIENCE = "resale-gate-scanner"
# Tokens stay valid until one day after the event
DEFAULT_VALIDITY_AFTER_EVENT = timedelta(days=1)

_TICKET_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class IssuedTicketToken:
    """A freshly minted ticket token.

    Attributes:
        token: The compact ``header.payload.signature`` text to encode as QR.
        ticket_number: Registry key carried in the ``tid`` claim.
        expires_at: Token expiry (UTC).
        event_id: Event the ticket admits to.
        holder_id: Holder carried in ``sub``.
        nonce: The token's ``nonce`` claim.
    """

    token: str
    ticket_number: str
    expires_at: datetime
    event_id: str
    holder_id: str
    nonce: str

    def to_registry_record(self) -> IssuedTicketRecord:
        return IssuedTicketRecord(
            ticket_number=self.ticket_number,
            event_id=self.event_id,
            holder_id=self.holder_id,
            proof=self.token,
            nonce=self.nonce,
        )


class TicketTokenIssuer(LoggingMixin):
    """Mints HS256 ticket tokens with the ticket signing secret."""

    def __init__(
        self,
        signing_secret: str,
        time_authority: TimeAuthorityProtocol | None = None,
        key_id: str | None = None,
        registry: TicketIssuanceRegistryProtocol | None = None,
    ) -> None:
        """Initialize the issuer.

        Args:
            signing_secret: Ticket signing secret shared with the verifier.
            time_authority: Clock for ``iat``. Defaults to system time.
            key_id: Optional ``kid`` header value.
            registry: Registry that issued tickets are written to.

        Raises:
            AdmissionConfigurationError: If ``signing_secret`` is empty.
        """
        if not signing_secret:
            raise AdmissionConfigurationError(
                "Cannot issue tickets without a signing secret"
            )
        self._secret = signing_secret
        self._time = time_authority or SystemTimeAuthority()
        self._key_id = key_id
        self._registry = registry
        self._init_logger(component="issuance")

    def generate_ticket_number(self, event_id: str) -> str:
        """Return a new ticket number like ``TIX-EVENTABC-1735689600000-X7K2QZ``."""
        millis = int(self._time.utcnow().timestamp() * 1000)
        suffix = "".join(secrets.choice(_TICKET_SUFFIX_ALPHABET) for _ in range(6))
        return f"TIX-{event_id[:8].upper()}-{millis}-{suffix}"

    def issue(
        self,
        event_id: str,
        holder_id: str,
        event_date: datetime,
        ticket_number: str | None = None,
        validity_after_event: timedelta = DEFAULT_VALIDITY_AFTER_EVENT,
    ) -> IssuedTicketToken:
        """Mint a token for one ticket.

        Args:
            event_id: Event the ticket admits to.
            holder_id: Ticket holder, stored in ``sub``.
            event_date: Event date; naive values are treated as UTC.
            ticket_number: Registry key. Generated when omitted.
            validity_after_event: How long after the event the token stays valid.

        Returns:
            The signed token with its ticket number and expiry.
        """
        now = self._time.utcnow()
        number = ticket_number or self.generate_ticket_number(event_id)
        if event_date.tzinfo is None:
            event_date = event_date.replace(tzinfo=now.tzinfo)
        expires_at = event_date + validity_after_event
        nonce = str(uuid4())

        claims = {
            "tid": number,
            "ticket_number": number,
            "event_id": event_id,
            "sub": holder_id,
            "nonce": nonce,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": TOKEN_ISSUER,
            "aud": TOKEN_AUDIENCE,
        }
        token = jwt.encode(
            claims,
            self._secret,
            algorithm=SUPPORTED_TOKEN_ALGORITHM,
            headers={"kid": self._key_id} if self._key_id else None,
        )

        self._log_operation("issue_ticket_token", event_id=event_id).info(
            "ticket_token_issued",
            expires_at=expires_at.isoformat(),
        )
        return IssuedTicketToken(
            token=token,
            ticket_number=number,
            expires_at=expires_at,
            event_id=event_id,
            holder_id=holder_id,
            nonce=nonce,
        )

    async def issue_and_register(
        self,
        event_id: str,
        holder_id: str,
        event_date: datetime,
        ticket_number: str | None = None,
        validity_after_event: timedelta = DEFAULT_VALIDITY_AFTER_EVENT,
    ) -> IssuedTicketToken:
        """Mint a token and record the ticket as ACTIVE in the registry.

        Raises:
            AdmissionConfigurationError: No registry was given to the issuer.
            ValueError: The ticket number is already registered.
        """
        if self._registry is None:
            raise AdmissionConfigurationError(
                "Cannot register tickets without a ticket registry"
            )
        issued = self.issue(
            event_id,
            holder_id,
            event_date,
            ticket_number=ticket_number,
            validity_after_event=validity_after_event,
        )
        await self._registry.record_issued(issued.to_registry_record())
        self._log_operation("register_ticket", event_id=event_id).info(
            "ticket_registered", ticket_number=issued.ticket_number
        )
        return issued
