"""SQLAlchemy implementation of SnapshotRepository."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.errors import InconsistentAggregateError
from src.domain.models.snapshots import HoldingValue
from src.domain.models.snapshots import PortfolioSnapshot as DomainSnapshot
from src.domain.repositories.snapshots import SnapshotRepository
from src.infrastructure.persistence.models.snapshots import PortfolioSnapshot as OrmSnapshot

logger = logging.getLogger(__name__)


def _document_to_holdings(
    document: Any, portfolio_id: UUID, snapshot_date: date
) -> dict[str, HoldingValue]:
    if not isinstance(document, dict):
        logger.error(
            "Snapshot %s/%s holdings_data is %s, expected an object",
            portfolio_id, snapshot_date, type(document).__name__,
        )
        raise InconsistentAggregateError(
            f"Snapshot {portfolio_id}/{snapshot_date} has a malformed holdings_data document"
        )
    holdings: dict[str, HoldingValue] = {}
    for symbol, entry in document.items():
        try:
            holdings[symbol] = HoldingValue.model_validate(entry)
        except ValidationError as exc:
            logger.error(
                "Snapshot %s/%s has a corrupt entry for %s: %r (%s)",
                portfolio_id, snapshot_date, symbol, entry, exc,
            )
            raise InconsistentAggregateError(
                f"Snapshot {portfolio_id}/{snapshot_date} has a non-numeric entry for {symbol}"
            ) from exc
    return holdings


def _holdings_to_document(holdings: Mapping[str, HoldingValue]) -> dict[str, dict[str, str]]:
    # mode="json" renders Decimal as str, so values round-trip without float error.
    return {symbol: entry.model_dump(mode="json") for symbol, entry in holdings.items()}


def _snapshot_to_domain(row: OrmSnapshot) -> DomainSnapshot:
    return DomainSnapshot(
        portfolio_id=row.portfolio_id,
        snapshot_date=row.snapshot_date,
        total_value=row.total_value,
        holdings_data=_document_to_holdings(
            row.holdings_data, row.portfolio_id, row.snapshot_date
        ),
        updated_at=row.updated_at,
    )


class SqlSnapshotRepository(SnapshotRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, portfolio_id: UUID, snapshot_date: date) -> DomainSnapshot | None:
        stmt = select(OrmSnapshot).where(
            OrmSnapshot.portfolio_id == portfolio_id,
            OrmSnapshot.snapshot_date == snapshot_date,
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return _snapshot_to_domain(row) if row else None

    async def upsert(
        self,
        portfolio_id: UUID,
        snapshot_date: date,
        patch: Mapping[str, HoldingValue],
    ) -> DomainSnapshot:
        # Step 1: make sure the row exists.  Concurrent writers race on the
        # unique constraint and all but one insert become no-ops.
        insert_stmt = (
            pg_insert(OrmSnapshot)
            .values(
                snapshot_id=uuid4(),
                portfolio_id=portfolio_id,
                snapshot_date=snapshot_date,
                total_value=Decimal("0"),
                holdings_data={},
            )
            .on_conflict_do_nothing(index_elements=["portfolio_id", "snapshot_date"])
        )
        await self._session.execute(insert_stmt)

        # Step 2: lock the row for the rest of the transaction, then merge.
        lock_stmt = (
            select(OrmSnapshot)
            .where(
                OrmSnapshot.portfolio_id == portfolio_id,
                OrmSnapshot.snapshot_date == snapshot_date,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(lock_stmt)
        row = result.scalar_one()

        merged = _snapshot_to_domain(row).merged(patch)
        row.holdings_data = _holdings_to_document(merged.holdings_data)
        row.total_value = merged.total_value
        await self._session.flush()
        return merged

    async def range(
        self, portfolio_id: UUID, start: date, end: date
    ) -> list[DomainSnapshot]:
        if start > end:
            return []
        stmt = (
            select(OrmSnapshot)
            .where(
                OrmSnapshot.portfolio_id == portfolio_id,
                OrmSnapshot.snapshot_date >= start,
                OrmSnapshot.snapshot_date <= end,
            )
            .order_by(OrmSnapshot.snapshot_date.asc())
        )
        result = await self._session.execute(stmt)
        return [_snapshot_to_domain(row) for row in result.scalars()]

    async def get_latest_date(self, portfolio_id: UUID) -> date | None:
        stmt = select(func.max(OrmSnapshot.snapshot_date)).where(
            OrmSnapshot.portfolio_id == portfolio_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
