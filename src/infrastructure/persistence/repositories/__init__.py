"""Concrete SQLAlchemy repository implementations.

Exports all SqlRepository classes and the get_repositories() factory used to
bind them to one AsyncSession at the application boundary.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .holdings import SqlHoldingRepository
from .portfolios import SqlPortfolioRepository
from .snapshots import SqlSnapshotRepository


@dataclass
class Repositories:
    """All repository instances bound to a single AsyncSession."""

    portfolios: SqlPortfolioRepository
    holdings: SqlHoldingRepository
    snapshots: SqlSnapshotRepository


def get_repositories(session: AsyncSession) -> Repositories:
    """Construct all repositories bound to the given session.

        async with database.session() as session:
            repos = get_repositories(session)
            snapshot = await repos.snapshots.find(portfolio_id, day)
    """
    return Repositories(
        portfolios=SqlPortfolioRepository(session),
        holdings=SqlHoldingRepository(session),
        snapshots=SqlSnapshotRepository(session),
    )


__all__ = [
    "SqlPortfolioRepository",
    "SqlHoldingRepository",
    "SqlSnapshotRepository",
    "Repositories",
    "get_repositories",
]
