"""Holding service: the entry point the controller layer calls.

Resolves portfolio ownership, records purchase lots and routes each purchase
to the valuation engine's live or historical flow.  Holdings and their
snapshot contributions are written through the same session, so a failed
valuation also discards the lot.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from uuid import UUID

from src.domain.errors import InvalidContributionError, PortfolioNotFoundError
from src.domain.models.enums import TimeRange
from src.domain.models.market_data import Quote
from src.domain.models.portfolios import (
    Holding,
    HoldingSummary,
    NewHolding,
    Portfolio,
    normalise_symbol,
)
from src.domain.models.snapshots import ChartPoint, PortfolioSnapshot
from src.domain.repositories.holdings import HoldingRepository
from src.domain.repositories.portfolios import PortfolioRepository
from src.domain.services.valuation import ValuationEngine

logger = logging.getLogger(__name__)


class HoldingService:
    def __init__(
        self,
        portfolios: PortfolioRepository,
        holdings: HoldingRepository,
        valuation: ValuationEngine,
    ) -> None:
        self._portfolios = portfolios
        self._holdings = holdings
        self._valuation = valuation

    async def add_holding(
        self, user_id: UUID, portfolio_id: UUID, new_holding: NewHolding
    ) -> Holding:
        """Record a purchase lot and fold it into the portfolio's snapshots.

        Raises:
            PortfolioNotFoundError: portfolio missing or owned by someone else.
            InvalidContributionError: purchase dated after today.
            UpstreamUnavailableError, NoHistoricalDataError: from valuation.
        """
        await self._require_portfolio(user_id, portfolio_id)
        today = self._valuation.today()
        bought_at = new_holding.bought_at_date or today
        if bought_at > today:
            raise InvalidContributionError(f"Purchase date {bought_at} is in the future")

        holding = Holding(
            portfolio_id=portfolio_id,
            symbol=new_holding.symbol,
            shares=new_holding.shares,
            bought_at_price=new_holding.bought_at_price,
            bought_at_date=bought_at,
        )
        await self._holdings.create(holding)

        if bought_at == today:
            await self._valuation.record_live_contribution(
                portfolio_id, holding.symbol, holding.shares, holding.bought_at_price
            )
        else:
            await self._valuation.backfill_historical_contribution(
                portfolio_id,
                holding.symbol,
                holding.shares,
                holding.bought_at_price,
                bought_at,
            )
        logger.info(
            "Added holding %s (%s) to portfolio %s",
            holding.holding_id, holding.symbol, portfolio_id,
        )
        return holding

    async def get_holdings_by_symbol(
        self, user_id: UUID, portfolio_id: UUID, symbol: str
    ) -> list[Holding]:
        await self._require_portfolio(user_id, portfolio_id)
        return await self._holdings.list_for_portfolio(portfolio_id, normalise_symbol(symbol))

    async def get_aggregated_holdings(
        self, user_id: UUID, portfolio_id: UUID
    ) -> list[HoldingSummary]:
        """Collapse every lot into one line per symbol, ordered by symbol."""
        await self._require_portfolio(user_id, portfolio_id)
        lots = await self._holdings.list_for_portfolio(portfolio_id)
        by_symbol: dict[str, list[Holding]] = defaultdict(list)
        for lot in lots:
            by_symbol[lot.symbol].append(lot)
        return [HoldingSummary.from_lots(by_symbol[s]) for s in sorted(by_symbol)]

    async def get_portfolio_history(
        self, user_id: UUID, portfolio_id: UUID, time_range: TimeRange
    ) -> list[ChartPoint]:
        await self._require_portfolio(user_id, portfolio_id)
        return await self._valuation.get_chart_series_for_range(portfolio_id, time_range)

    async def create_snapshot(
        self, user_id: UUID, portfolio_id: UUID
    ) -> PortfolioSnapshot | None:
        """Revalue every held symbol at its current price into today's snapshot.

        Returns None when the portfolio holds nothing.
        """
        await self._require_portfolio(user_id, portfolio_id)
        lots = await self._holdings.list_for_portfolio(portfolio_id)
        if not lots:
            return None
        positions: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        for lot in lots:
            positions[lot.symbol] += lot.shares
        return await self._valuation.revalue_today(portfolio_id, positions)

    async def get_last_snapshot_date(self, user_id: UUID, portfolio_id: UUID) -> date | None:
        await self._require_portfolio(user_id, portfolio_id)
        return await self._valuation.get_last_snapshot_date(portfolio_id)

    async def needs_snapshot(self, user_id: UUID, portfolio_id: UUID) -> bool:
        await self._require_portfolio(user_id, portfolio_id)
        return await self._valuation.needs_snapshot(portfolio_id)

    async def get_asset_details(self, symbol: str) -> Quote:
        return await self._valuation.get_asset_details(symbol)

    async def _require_portfolio(self, user_id: UUID, portfolio_id: UUID) -> Portfolio:
        portfolio = await self._portfolios.get_for_owner(portfolio_id, user_id)
        if portfolio is None:
            raise PortfolioNotFoundError(
                f"Portfolio {portfolio_id} not found or does not belong to user"
            )
        return portfolio
