"""Shared fixtures: in-memory repositories and a scripted price gateway.

The fakes implement the domain interfaces exactly, so services under test run
the same merge path (PortfolioSnapshot.merged) the SQL store uses.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from src.domain.gateways import PriceDataGateway
from src.domain.models.market_data import PricePoint, Quote
from src.domain.models.portfolios import Holding, Portfolio
from src.domain.models.snapshots import HoldingValue, PortfolioSnapshot
from src.domain.repositories.holdings import HoldingRepository
from src.domain.repositories.portfolios import PortfolioRepository
from src.domain.repositories.snapshots import SnapshotRepository
from src.domain.services.holdings import HoldingService
from src.domain.services.valuation import ValuationEngine

TODAY = date(2026, 3, 16)


class InMemorySnapshotRepository(SnapshotRepository):
    def __init__(self) -> None:
        self.rows: dict[tuple[UUID, date], PortfolioSnapshot] = {}
        self.upserted_dates: list[date] = []

    async def find(self, portfolio_id, snapshot_date):
        return self.rows.get((portfolio_id, snapshot_date))

    async def upsert(self, portfolio_id, snapshot_date, patch: Mapping[str, HoldingValue]):
        key = (portfolio_id, snapshot_date)
        current = self.rows.get(key) or PortfolioSnapshot.empty(portfolio_id, snapshot_date)
        merged = current.merged(patch)
        self.rows[key] = merged
        self.upserted_dates.append(snapshot_date)
        return merged

    async def range(self, portfolio_id, start, end):
        return [
            self.rows[k]
            for k in sorted(self.rows, key=lambda k: k[1])
            if k[0] == portfolio_id and start <= k[1] <= end
        ]

    async def get_latest_date(self, portfolio_id):
        dates = [d for (pid, d) in self.rows if pid == portfolio_id]
        return max(dates) if dates else None


class ScriptedPriceGateway(PriceDataGateway):
    """Answers from preset quotes/series and records every call."""

    def __init__(self) -> None:
        self.quotes: dict[str, Quote | None] = {}
        self.series: dict[str, list[PricePoint]] = {}
        self.calls: list[tuple] = []

    def set_quote(self, symbol: str, price: str | None, previous_close: str | None = None) -> None:
        self.quotes[symbol] = (
            None
            if price is None
            else Quote(symbol=symbol, current_price=Decimal(price), previous_close=previous_close)
        )

    def set_series(self, symbol: str, points: list[tuple[date, str]]) -> None:
        self.series[symbol] = [PricePoint(date=d, price=Decimal(p)) for d, p in points]

    async def get_current_quote(self, symbol):
        self.calls.append(("quote", symbol))
        return self.quotes.get(symbol)

    async def get_historical_series(self, symbol, start, end):
        self.calls.append(("series", symbol, start, end))
        return list(self.series.get(symbol, []))


class InMemoryHoldingRepository(HoldingRepository):
    def __init__(self) -> None:
        self.rows: list[Holding] = []

    async def list_for_portfolio(self, portfolio_id, symbol=None):
        lots = [
            h for h in self.rows
            if h.portfolio_id == portfolio_id and (symbol is None or h.symbol == symbol)
        ]
        return sorted(lots, key=lambda h: (h.bought_at_date, h.created_at))

    async def create(self, entity):
        self.rows.append(entity)
        return entity


class InMemoryPortfolioRepository(PortfolioRepository):
    def __init__(self) -> None:
        self.rows: dict[UUID, Portfolio] = {}

    def add(self, user_id: UUID) -> Portfolio:
        portfolio = Portfolio(user_id=user_id, name="Simulated")
        self.rows[portfolio.portfolio_id] = portfolio
        return portfolio

    async def get_for_owner(self, portfolio_id, user_id):
        portfolio = self.rows.get(portfolio_id)
        if portfolio is None or portfolio.user_id != user_id:
            return None
        return portfolio


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def snapshots() -> InMemorySnapshotRepository:
    return InMemorySnapshotRepository()


@pytest.fixture
def gateway() -> ScriptedPriceGateway:
    return ScriptedPriceGateway()


@pytest.fixture
def engine(snapshots, gateway) -> ValuationEngine:
    return ValuationEngine(snapshots, gateway, clock=lambda: TODAY)


@pytest.fixture
def holdings_repo() -> InMemoryHoldingRepository:
    return InMemoryHoldingRepository()


@pytest.fixture
def portfolios_repo() -> InMemoryPortfolioRepository:
    return InMemoryPortfolioRepository()


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def portfolio(portfolios_repo, user_id) -> Portfolio:
    return portfolios_repo.add(user_id)


@pytest.fixture
def holding_service(portfolios_repo, holdings_repo, engine) -> HoldingService:
    return HoldingService(portfolios_repo, holdings_repo, engine)
