"""Portfolio valuation engine.

Translates holding-purchase events into snapshot upserts and serves chart
queries from the snapshot store.

Two write flows share one merge primitive (SnapshotRepository.upsert):

    record_live_contribution         purchase dated today, priced at the
                                     caller's transaction price
    backfill_historical_contribution purchase dated in the past, priced at each
                                     day's historical close, with today's value
                                     taken from a live quote

"Today" is the UTC calendar date unless a different clock is injected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

from src.domain.errors import (
    InvalidContributionError,
    NoHistoricalDataError,
    UpstreamUnavailableError,
)
from src.domain.gateways import PriceDataGateway
from src.domain.models.enums import TimeRange
from src.domain.models.market_data import PricePoint, Quote
from src.domain.models.portfolios import normalise_symbol
from src.domain.models.snapshots import ChartPoint, HoldingValue, PortfolioSnapshot
from src.domain.repositories.snapshots import SnapshotRepository

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class ValuationEngine:
    def __init__(
        self,
        snapshots: SnapshotRepository,
        prices: PriceDataGateway,
        clock: Callable[[], date] = utc_today,
    ) -> None:
        self._snapshots = snapshots
        self._prices = prices
        self._clock = clock

    def today(self) -> date:
        return self._clock()

    # ------------------------------------------------------------------ #
    # Write flows                                                          #
    # ------------------------------------------------------------------ #

    async def record_live_contribution(
        self,
        portfolio_id: UUID,
        symbol: str,
        shares: Decimal,
        price: Decimal,
    ) -> PortfolioSnapshot:
        """Record a purchase made today at the caller's transaction price.

        The live quote is fetched only to confirm the symbol is currently
        tradeable; it never prices the contribution.

        Raises:
            UpstreamUnavailableError: no quote could be obtained for symbol.
        """
        symbol = normalise_symbol(symbol)
        today = self.today()

        quote = await self._prices.get_current_quote(symbol)
        if quote is None:
            logger.warning("Live contribution rejected: no quote for %s", symbol)
            raise UpstreamUnavailableError(symbol)

        entry = HoldingValue.priced(price, shares)
        snapshot = await self._snapshots.upsert(portfolio_id, today, {symbol: entry})
        logger.info(
            "Live contribution %s x%s @ %s on %s for portfolio %s; total now %s",
            symbol, shares, price, today, portfolio_id, snapshot.total_value,
        )
        return snapshot

    async def backfill_historical_contribution(
        self,
        portfolio_id: UUID,
        symbol: str,
        shares: Decimal,
        price: Decimal,
        bought_at_date: date,
    ) -> list[PortfolioSnapshot]:
        """Value a past purchase on every trading day from bought_at_date to today.

        price is the recorded purchase price.  It is kept on the holding as
        cost basis; snapshot values use the provider's daily closes.

        Today's point comes from a live quote when the historical feed does
        not include it yet.  That quote is resolved before anything is
        written, so a missing quote fails the whole backfill.

        Raises:
            InvalidContributionError: bought_at_date is not before today.
            NoHistoricalDataError: the provider has no closes for the range.
            UpstreamUnavailableError: today's fallback quote is unavailable.
        """
        symbol = normalise_symbol(symbol)
        today = self.today()
        if bought_at_date >= today:
            raise InvalidContributionError(
                f"Historical backfill needs a purchase date before {today}, got {bought_at_date}"
            )

        series = await self._prices.get_historical_series(symbol, bought_at_date, today)
        points = self._clip_series(series, bought_at_date, today)
        if not points:
            logger.warning(
                "No historical data for %s between %s and %s", symbol, bought_at_date, today
            )
            raise NoHistoricalDataError(symbol)

        if today not in points:
            live_price = await self._prices.get_current_price(symbol)
            if live_price is None:
                logger.error(
                    "Backfill for %s aborted: historical feed lacks %s and no live quote",
                    symbol, today,
                )
                raise UpstreamUnavailableError(symbol, "no live quote to complete backfill")
            logger.debug("Synthesised %s point for %s at %s", today, symbol, live_price)
            points[today] = live_price

        logger.info(
            "Backfilling %s x%s (bought @ %s on %s) across %d dates for portfolio %s",
            symbol, shares, price, bought_at_date, len(points), portfolio_id,
        )
        written: list[PortfolioSnapshot] = []
        for day in sorted(points):
            entry = HoldingValue.priced(points[day], shares)
            snapshot = await self._snapshots.upsert(portfolio_id, day, {symbol: entry})
            logger.debug("Upserted %s for %s: total %s", symbol, day, snapshot.total_value)
            written.append(snapshot)
        return written

    async def revalue_today(
        self, portfolio_id: UUID, positions: Mapping[str, Decimal]
    ) -> PortfolioSnapshot:
        """Re-price whole positions at current quotes into today's snapshot.

        positions maps symbol to the total shares held.  Quotes are fetched
        concurrently and every one must be available; otherwise nothing is
        written.

        Raises:
            UpstreamUnavailableError: any symbol lacks a current price.
        """
        today = self.today()
        held = {normalise_symbol(symbol): shares for symbol, shares in positions.items()}
        prices = await self._prices.get_current_prices(held)
        missing = sorted(symbol for symbol, price in prices.items() if price is None)
        if missing:
            logger.warning("Revaluation aborted: no current price for %s", ", ".join(missing))
            raise UpstreamUnavailableError(missing[0])

        patch = {
            symbol: HoldingValue.priced(prices[symbol], shares)
            for symbol, shares in held.items()
        }

        snapshot = await self._snapshots.upsert(portfolio_id, today, patch)
        logger.info(
            "Revalued %d positions for portfolio %s on %s; total %s",
            len(patch), portfolio_id, today, snapshot.total_value,
        )
        return snapshot

    # ------------------------------------------------------------------ #
    # Read flows                                                           #
    # ------------------------------------------------------------------ #

    async def get_chart_series(
        self, portfolio_id: UUID, start: date, end: date
    ) -> list[ChartPoint]:
        """Return recorded totals within [start, end]; gaps are left as gaps."""
        rows = await self._snapshots.range(portfolio_id, start, end)
        return [ChartPoint.from_snapshot(row) for row in rows]

    async def get_chart_series_for_range(
        self, portfolio_id: UUID, time_range: TimeRange
    ) -> list[ChartPoint]:
        today = self.today()
        return await self.get_chart_series(portfolio_id, today - time_range.lookback, today)

    async def get_last_snapshot_date(self, portfolio_id: UUID) -> date | None:
        return await self._snapshots.get_latest_date(portfolio_id)

    async def needs_snapshot(self, portfolio_id: UUID) -> bool:
        latest = await self._snapshots.get_latest_date(portfolio_id)
        return latest is None or latest < self.today()

    async def get_asset_details(self, symbol: str) -> Quote:
        """Return the current quote for symbol, including day change.

        Raises:
            UpstreamUnavailableError: no quote could be obtained for symbol.
        """
        symbol = normalise_symbol(symbol)
        quote = await self._prices.get_current_quote(symbol)
        if quote is None:
            raise UpstreamUnavailableError(symbol)
        return quote

    # ------------------------------------------------------------------ #
    # Helpers                                                              #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _clip_series(series: list[PricePoint], start: date, end: date) -> dict[date, Decimal]:
        # Later duplicates win, matching the provider's own ordering.
        return {p.date: p.price for p in series if start <= p.date <= end}
