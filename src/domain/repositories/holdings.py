"""Holding repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.models.portfolios import Holding


class HoldingRepository(ABC):
    """Append-only store of Holding lots.

    Lots are immutable after creation; there is no update or delete.
    """

    @abstractmethod
    async def list_for_portfolio(
        self, portfolio_id: UUID, symbol: str | None = None
    ) -> list[Holding]:
        """Return a portfolio's lots ordered by bought_at_date, then created_at.

        When symbol is given only lots of that (uppercase) symbol are returned.
        """

    @abstractmethod
    async def create(self, entity: Holding) -> Holding:
        """Persist a new lot."""
