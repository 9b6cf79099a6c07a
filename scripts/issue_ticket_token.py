#!/usr/bin/env python3
"""Issue a signed ticket token (or signed structured payload) for an event.

Organizers run this to mint the QR content printed on a ticket. The output
is accepted by the listing admission engine when it runs with the same
TICKET_SIGNING_SECRET.

Examples:
    TICKET_SIGNING_SECRET=... python scripts/issue_ticket_token.py \\
        --event-id 7f7c... --holder-id student-42 --event-date 2026-03-14T20:00:00Z

    python scripts/issue_ticket_token.py --secret ... --event-id ev-1 \\
        --holder-id h-1 --event-date 2026-03-14 --format structured

    DATABASE_URL=... python scripts/issue_ticket_token.py --secret ... \\
        --event-id ev-1 --holder-id h-1 --event-date 2026-03-14 --register
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

from resale_gate.application.ports.ticket_registry import (
    TicketIssuanceRegistryProtocol,
)
from resale_gate.application.services.signature_verifier import (
    sign_structured_payload,
)
from resale_gate.application.services.ticket_token_issuer import TicketTokenIssuer
from resale_gate.bootstrap.database import close_database_engine, get_session_factory
from resale_gate.domain.errors import AdmissionConfigurationError
from resale_gate.domain.models.issued_ticket import IssuedTicketRecord
from resale_gate.infrastructure.adapters.persistence.ticket_registry import (
    PostgresTicketRegistry,
)

SECRET_ENV = "TICKET_SIGNING_SECRET"
DATABASE_URL_ENV = "DATABASE_URL"


def parse_event_date(value: str) -> datetime:
    """Parse an ISO 8601 date or datetime; naive values are UTC.

    Raises:
        ValueError: If ``value`` is not ISO 8601.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_structured_fields(
    event_id: str, holder_id: str, ticket_number: str, event_date: datetime
) -> dict[str, Any]:
    """Fields of a signed structured payload for one ticket."""
    return {
        "tid": ticket_number,
        "event_id": event_id,
        "holder": holder_id,
        "event_date": event_date.isoformat(),
    }



async def issue_proof(
    args: argparse.Namespace,
    secret: str,
    event_date: datetime,
    registry: TicketIssuanceRegistryProtocol | None = None,
) -> tuple[str, str, str | None]:
    """Mint the proof, registering the ticket when ``registry`` is given.

    Returns:
        (proof, ticket_number, expires_at) where expires_at is ISO 8601 for
        tokens and None for structured payloads.

    Raises:
        ValueError: The ticket number is already registered.
    """
    issuer = TicketTokenIssuer(secret, key_id=args.kid, registry=registry)

    if args.format == "token":
        if registry is not None:
            issued = await issuer.issue_and_register(
                args.event_id,
                args.holder_id,
                event_date,
                ticket_number=args.ticket_number,
            )
        else:
            issued = issuer.issue(
                args.event_id,
                args.holder_id,
                event_date,
                ticket_number=args.ticket_number,
            )
        return issued.token, issued.ticket_number, issued.expires_at.isoformat()

    ticket_number = args.ticket_number or issuer.generate_ticket_number(args.event_id)
    fields = build_structured_fields(
        args.event_id, args.holder_id, ticket_number, event_date
    )
    proof = sign_structured_payload(fields, secret)
    if registry is not None:
        await registry.record_issued(
            IssuedTicketRecord(
                ticket_number=ticket_number,
                event_id=args.event_id,
                holder_id=args.holder_id,
                proof=proof,
            )
        )
    return proof, ticket_number, None


async def issue_proof_with_database(
    args: argparse.Namespace, secret: str, event_date: datetime
) -> tuple[str, str, str | None]:
    """Issue and register against the PostgreSQL registry at DATABASE_URL."""
    registry = PostgresTicketRegistry(session_factory=get_session_factory())
    try:
        return await issue_proof(args, secret, event_date, registry)
    finally:
        await close_database_engine()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Issue a signed ticket token for resale verification",
    )
    p.add_argument("--event-id", required=True, help="Event the ticket admits to")
    p.add_argument("--holder-id", required=True, help="Ticket holder id")
    p.add_argument(
        "--event-date",
        required=True,
        help="Event date, ISO 8601 (naive values are UTC)",
    )
    p.add_argument(
        "--ticket-number",
        default=None,
        help="Registry ticket number (generated when omitted)",
    )
    p.add_argument(
        "--secret",
        default=None,
        help=f"Signing secret (default: ${SECRET_ENV})",
    )
    p.add_argument("--kid", default=None, help="Optional key id header")
    p.add_argument(
        "--format",
        choices=["token", "structured"],
        default="token",
        help="Output a compact token or a signed JSON payload",
    )
    p.add_argument(
        "--register",
        action="store_true",
        help=f"Record the ticket as ACTIVE in the registry (needs ${DATABASE_URL_ENV})",
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON object with the proof and its ticket number",
    )
    return p.parse_args(argv)


def main(
    argv: list[str] | None = None,
    registry: TicketIssuanceRegistryProtocol | None = None,
) -> int:
    args = parse_args(argv)
    # Keep stdout for the proof only
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(file=sys.stderr))

    secret = args.secret or os.environ.get(SECRET_ENV)
    if not secret:
        print(
            f"ISSUE REJECTED: no signing secret (use --secret or set {SECRET_ENV})",
            file=sys.stderr,
        )
        return 1

    try:
        event_date = parse_event_date(args.event_date)
    except ValueError:
        print(f"ISSUE REJECTED: invalid --event-date {args.event_date!r}", file=sys.stderr)
        return 1

    if args.register and registry is None and not os.environ.get(DATABASE_URL_ENV):
        print(
            f"ISSUE REJECTED: --register needs {DATABASE_URL_ENV} to be set",
            file=sys.stderr,
        )
        return 1

    try:
        if args.register and registry is None:
            proof, ticket_number, expires_at = asyncio.run(
                issue_proof_with_database(args, secret, event_date)
            )
        else:
            proof, ticket_number, expires_at = asyncio.run(
                issue_proof(
                    args, secret, event_date, registry if args.register else None
                )
            )
    except (AdmissionConfigurationError, ValueError) as e:
        print(f"ISSUE REJECTED: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(
            json.dumps(
                {
                    "proof": proof,
                    "ticket_number": ticket_number,
                    "format": args.format,
                    "expires_at": expires_at,
                    "registered": args.register,
                }
            )
        )
    else:
        print(proof)
    return 0


if __name__ == "__main__":
    sys.exit(main())
