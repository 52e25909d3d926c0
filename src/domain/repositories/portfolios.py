"""Portfolio repository interface.

Portfolio CRUD lives outside this service; valuation only needs to resolve a
portfolio for its owner.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.models.portfolios import Portfolio


class PortfolioRepository(ABC):
    @abstractmethod
    async def get_for_owner(self, portfolio_id: UUID, user_id: UUID) -> Portfolio | None:
        """Return the portfolio when it exists and belongs to user_id, else None."""
