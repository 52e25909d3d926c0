"""SQLAlchemy implementation of HoldingRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models.portfolios import Holding as DomainHolding
from src.domain.repositories.holdings import HoldingRepository
from src.infrastructure.persistence.models.portfolios import Holding as OrmHolding


class SqlHoldingRepository(HoldingRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_domain(row: OrmHolding) -> DomainHolding:
        return DomainHolding(
            holding_id=row.holding_id,
            portfolio_id=row.portfolio_id,
            symbol=row.symbol,
            shares=row.shares,
            bought_at_price=row.bought_at_price,
            bought_at_date=row.bought_at_date,
            created_at=row.created_at,
        )

    async def list_for_portfolio(
        self, portfolio_id: UUID, symbol: str | None = None
    ) -> list[DomainHolding]:
        stmt = (
            select(OrmHolding)
            .where(OrmHolding.portfolio_id == portfolio_id)
            .order_by(OrmHolding.bought_at_date.asc(), OrmHolding.created_at.asc())
        )
        if symbol is not None:
            stmt = stmt.where(OrmHolding.symbol == symbol.upper())
        result = await self._session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars()]

    async def create(self, entity: DomainHolding) -> DomainHolding:
        row = OrmHolding(
            holding_id=entity.holding_id,
            portfolio_id=entity.portfolio_id,
            symbol=entity.symbol,
            shares=entity.shares,
            bought_at_price=entity.bought_at_price,
            bought_at_date=entity.bought_at_date,
            created_at=entity.created_at,
        )
        self._session.add(row)
        await self._session.flush()
        return entity
