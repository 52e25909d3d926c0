"""SQLAlchemy implementation of PortfolioRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models.portfolios import Portfolio as DomainPortfolio
from src.domain.repositories.portfolios import PortfolioRepository
from src.infrastructure.persistence.models.portfolios import Portfolio as OrmPortfolio


class SqlPortfolioRepository(PortfolioRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_domain(row: OrmPortfolio) -> DomainPortfolio:
        return DomainPortfolio(
            portfolio_id=row.portfolio_id,
            user_id=row.user_id,
            name=row.name,
            starting_balance=row.starting_balance,
            created_at=row.created_at,
        )

    async def get_for_owner(
        self, portfolio_id: UUID, user_id: UUID
    ) -> DomainPortfolio | None:
        stmt = select(OrmPortfolio).where(
            OrmPortfolio.portfolio_id == portfolio_id,
            OrmPortfolio.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None
