"""PostgreSQL listing store.

Table ``listings`` carries a UNIQUE constraint on ``fingerprint``. A second
insert of the same ticket proof fails with SQLSTATE 23505, which this adapter
maps to DuplicateFingerprintError. That constraint is the only guard that
holds when two submissions of one ticket race past the ledger lookup.

Schema:
    CREATE TABLE listings (
        id UUID PRIMARY KEY,
        event_id TEXT NOT NULL,
        seller_id UUID NOT NULL,
        original_price NUMERIC(10, 2) NOT NULL,
        selling_price NUMERIC(10, 2) NOT NULL,
        quantity INTEGER NOT NULL,
        notes TEXT,
        status TEXT NOT NULL DEFAULT 'available',
        fingerprint CHAR(64) NOT NULL UNIQUE,
        cryptographically_verified BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    );
    CREATE INDEX idx_listings_seller_created ON listings (seller_id, created_at);
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resale_gate.application.services.fingerprint_service import display_fingerprint
from resale_gate.domain.errors import (
    DuplicateFingerprintError,
    InvalidListingTransitionError,
    ListingNotFoundError,
)
from resale_gate.domain.models.listing import ListingRecord, ListingStatus
from resale_gate.infrastructure.observability.logging import get_logger_for_component

UNIQUE_VIOLATION_SQLSTATE = "23505"
REMOVED_STATUS_LABEL = "removed"

_LISTING_COLUMNS = """
    id, event_id, seller_id, original_price, selling_price, quantity, notes,
    status, fingerprint, cryptographically_verified, created_at, updated_at
"""

logger = get_logger_for_component(__name__, component="persistence")


def is_unique_violation(exc: IntegrityError) -> bool:
    """Whether an IntegrityError came from a unique constraint.

    asyncpg errors expose ``sqlstate``; psycopg errors expose ``pgcode``.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == UNIQUE_VIOLATION_SQLSTATE


def _row_to_listing(row: Mapping[str, Any]) -> ListingRecord:
    return ListingRecord(
        id=row["id"] if isinstance(row["id"], UUID) else UUID(str(row["id"])),
        event_id=str(row["event_id"]),
        seller_id=(
            row["seller_id"]
            if isinstance(row["seller_id"], UUID)
            else UUID(str(row["seller_id"]))
        ),
        original_price=float(row["original_price"]),
        selling_price=float(row["selling_price"]),
        quantity=int(row["quantity"]),
        notes=row["notes"],
        status=ListingStatus(row["status"]),
        fingerprint=str(row["fingerprint"]).strip(),
        cryptographically_verified=bool(row["cryptographically_verified"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class PostgresListingStore:
    """ListingStoreProtocol over the ``listings`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_fingerprint(self, fingerprint: str) -> ListingRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"""
                    SELECT {_LISTING_COLUMNS}
                    FROM listings
                    WHERE fingerprint = :fingerprint
                """),
                {"fingerprint": fingerprint},
            )
            row = result.mappings().first()
        return _row_to_listing(row) if row is not None else None

    async def insert(self, record: ListingRecord) -> ListingRecord:
        """Insert ``record``.

        Raises:
            DuplicateFingerprintError: Unique violation on ``fingerprint``.
            IntegrityError: Any other constraint violation.
        """
        async with self._session_factory() as session:
            try:
                await session.execute(
                    text(f"""
                        INSERT INTO listings ({_LISTING_COLUMNS})
                        VALUES (
                            :id, :event_id, :seller_id, :original_price,
                            :selling_price, :quantity, :notes, :status,
                            :fingerprint, :cryptographically_verified,
                            :created_at, :updated_at
                        )
                    """),
                    {
                        "id": record.id,
                        "event_id": record.event_id,
                        "seller_id": record.seller_id,
                        "original_price": record.original_price,
                        "selling_price": record.selling_price,
                        "quantity": record.quantity,
                        "notes": record.notes,
                        "status": record.status.value,
                        "fingerprint": record.fingerprint,
                        "cryptographically_verified": record.cryptographically_verified,
                        "created_at": record.created_at,
                        "updated_at": record.updated_at,
                    },
                )
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                if is_unique_violation(exc):
                    hint = display_fingerprint(record.fingerprint)
                    logger.info("listing_insert_unique_violation", fingerprint=hint)
                    raise DuplicateFingerprintError(hint) from exc
                raise
        return record

    async def count_recent_by_seller(self, seller_id: UUID, since: datetime) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT COUNT(*)
                    FROM listings
                    WHERE seller_id = :seller_id
                      AND created_at >= :since
                """),
                {"seller_id": seller_id, "since": since},
            )
            return int(result.scalar() or 0)

    async def get(self, listing_id: UUID) -> ListingRecord | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"""
                    SELECT {_LISTING_COLUMNS}
                    FROM listings
                    WHERE id = :listing_id
                """),
                {"listing_id": listing_id},
            )
            row = result.mappings().first()
        return _row_to_listing(row) if row is not None else None

    async def update_status(
        self, listing_id: UUID, status: ListingStatus
    ) -> ListingRecord:
        """Apply a transition under a row lock.

        Raises:
            ListingNotFoundError: Unknown listing.
            InvalidListingTransitionError: Transition not allowed.
        """
        async with self._session_factory() as session:
            async with session.begin():
                current = await self._lock_row(session, listing_id)
                if status not in current.status.valid_transitions():
                    raise InvalidListingTransitionError(
                        listing_id, current.status.value, status.value
                    )
                updated_at = datetime.now(timezone.utc)
                await session.execute(
                    text("""
                        UPDATE listings
                        SET status = :status, updated_at = :updated_at
                        WHERE id = :listing_id
                    """),
                    {
                        "status": status.value,
                        "updated_at": updated_at,
                        "listing_id": listing_id,
                    },
                )
        return current.with_status(status, at=updated_at)

    async def remove(self, listing_id: UUID) -> None:
        """Delete an available listing under a row lock.

        Raises:
            ListingNotFoundError: Unknown listing.
            InvalidListingTransitionError: Listing is reserved or sold.
        """
        async with self._session_factory() as session:
            async with session.begin():
                current = await self._lock_row(session, listing_id)
                if not current.status.is_removable():
                    raise InvalidListingTransitionError(
                        listing_id, current.status.value, REMOVED_STATUS_LABEL
                    )
                await session.execute(
                    text("DELETE FROM listings WHERE id = :listing_id"),
                    {"listing_id": listing_id},
                )

    async def _lock_row(
        self, session: AsyncSession, listing_id: UUID
    ) -> ListingRecord:
        result = await session.execute(
            text(f"""
                SELECT {_LISTING_COLUMNS}
                FROM listings
                WHERE id = :listing_id
                FOR UPDATE
            """),
            {"listing_id": listing_id},
        )
        row = result.mappings().first()
        if row is None:
            raise ListingNotFoundError(listing_id)
        return _row_to_listing(row)
