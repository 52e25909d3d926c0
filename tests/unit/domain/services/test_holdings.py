"""Tests for src/domain/services/holdings.py."""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from src.domain.errors import (
    InvalidContributionError,
    NoHistoricalDataError,
    PortfolioNotFoundError,
    UpstreamUnavailableError,
)
from src.domain.models.enums import TimeRange
from src.domain.models.portfolios import NewHolding

D = Decimal


def _new(symbol="AAPL", shares="10", price="150", bought_at_date=None) -> NewHolding:
    return NewHolding(
        symbol=symbol, shares=D(shares), bought_at_price=D(price), bought_at_date=bought_at_date
    )


# --- add_holding: routing ---

async def test_add_holding_without_date_is_live(holding_service, portfolio, user_id, gateway, snapshots, today):
    gateway.set_quote("AAPL", "190")
    holding = await holding_service.add_holding(user_id, portfolio.portfolio_id, _new())
    assert holding.bought_at_date == today
    assert snapshots.rows[(portfolio.portfolio_id, today)].total_value == D("1500")


async def test_add_holding_dated_today_is_live(holding_service, portfolio, user_id, gateway, today):
    gateway.set_quote("AAPL", "190")
    await holding_service.add_holding(user_id, portfolio.portfolio_id, _new(bought_at_date=today))
    assert ("series", "AAPL", today, today) not in gateway.calls


async def test_add_holding_in_past_backfills(holding_service, portfolio, user_id, gateway, snapshots, today):
    bought = today - timedelta(days=2)
    gateway.set_series("AAPL", [(bought, "140"), (today - timedelta(days=1), "145")])
    gateway.set_quote("AAPL", "150")

    await holding_service.add_holding(
        user_id, portfolio.portfolio_id, _new(shares="2", bought_at_date=bought)
    )

    pid = portfolio.portfolio_id
    assert [snapshots.rows[(pid, today - timedelta(days=n))].total_value for n in (2, 1, 0)] == [
        D("280"), D("290"), D("300"),
    ]


async def test_add_holding_persists_lot(holding_service, portfolio, user_id, gateway, holdings_repo):
    gateway.set_quote("AAPL", "190")
    holding = await holding_service.add_holding(user_id, portfolio.portfolio_id, _new(symbol="aapl"))
    assert holdings_repo.rows == [holding]
    assert holding.symbol == "AAPL"
    assert holding.bought_at_price == D("150")


async def test_add_holding_future_date_raises(holding_service, portfolio, user_id, today, holdings_repo):
    with pytest.raises(InvalidContributionError):
        await holding_service.add_holding(
            user_id, portfolio.portfolio_id, _new(bought_at_date=today + timedelta(days=1))
        )
    assert holdings_repo.rows == []


async def test_add_holding_propagates_no_historical_data(holding_service, portfolio, user_id, gateway, today):
    gateway.set_quote("NEWCO", "5")
    with pytest.raises(NoHistoricalDataError):
        await holding_service.add_holding(
            user_id, portfolio.portfolio_id, _new(symbol="NEWCO", bought_at_date=today - timedelta(days=4))
        )


# --- ownership ---

async def test_add_holding_unknown_portfolio_raises(holding_service, user_id):
    with pytest.raises(PortfolioNotFoundError):
        await holding_service.add_holding(user_id, uuid4(), _new())


async def test_add_holding_other_users_portfolio_raises(holding_service, portfolio, gateway):
    gateway.set_quote("AAPL", "190")
    with pytest.raises(PortfolioNotFoundError):
        await holding_service.add_holding(uuid4(), portfolio.portfolio_id, _new())


async def test_history_requires_ownership(holding_service, portfolio):
    with pytest.raises(PortfolioNotFoundError):
        await holding_service.get_portfolio_history(uuid4(), portfolio.portfolio_id, TimeRange.ONE_MONTH)


# --- read views ---

async def test_aggregated_holdings_collapse_lots_per_symbol(holding_service, portfolio, user_id, gateway):
    pid = portfolio.portfolio_id
    for sym in ("MSFT", "AAPL"):
        gateway.set_quote(sym, "1")
    await holding_service.add_holding(user_id, pid, _new("AAPL", "10", "100"))
    await holding_service.add_holding(user_id, pid, _new("AAPL", "10", "200"))
    await holding_service.add_holding(user_id, pid, _new("MSFT", "1", "300"))

    summaries = await holding_service.get_aggregated_holdings(user_id, pid)

    assert [s.symbol for s in summaries] == ["AAPL", "MSFT"]
    assert summaries[0].total_shares == D("20")
    assert summaries[0].average_cost == D("150")
    assert summaries[0].lot_count == 2


async def test_holdings_by_symbol_filters(holding_service, portfolio, user_id, gateway):
    pid = portfolio.portfolio_id
    gateway.set_quote("AAPL", "1")
    gateway.set_quote("MSFT", "1")
    await holding_service.add_holding(user_id, pid, _new("AAPL"))
    await holding_service.add_holding(user_id, pid, _new("MSFT"))

    lots = await holding_service.get_holdings_by_symbol(user_id, pid, "aapl")

    assert [lot.symbol for lot in lots] == ["AAPL"]


async def test_portfolio_history_returns_chart_points(holding_service, portfolio, user_id, gateway, today):
    gateway.set_quote("AAPL", "1")
    await holding_service.add_holding(user_id, portfolio.portfolio_id, _new())
    history = await holding_service.get_portfolio_history(user_id, portfolio.portfolio_id, TimeRange.ONE_DAY)
    assert [(p.date, p.total_value) for p in history] == [(today, D("1500"))]


# --- snapshots ---

async def test_create_snapshot_revalues_total_position(holding_service, portfolio, user_id, gateway):
    pid = portfolio.portfolio_id
    gateway.set_quote("AAPL", "150")
    await holding_service.add_holding(user_id, pid, _new("AAPL", "10", "150"))
    await holding_service.add_holding(user_id, pid, _new("AAPL", "5", "150"))
    gateway.set_quote("AAPL", "200")

    snap = await holding_service.create_snapshot(user_id, pid)

    assert snap.holdings_data["AAPL"].shares == D("15")
    assert snap.total_value == D("3000")


async def test_create_snapshot_empty_portfolio_returns_none(holding_service, portfolio, user_id):
    assert await holding_service.create_snapshot(user_id, portfolio.portfolio_id) is None


async def test_snapshot_status(holding_service, portfolio, user_id, gateway, today):
    pid = portfolio.portfolio_id
    assert await holding_service.needs_snapshot(user_id, pid) is True
    assert await holding_service.get_last_snapshot_date(user_id, pid) is None
    gateway.set_quote("AAPL", "1")
    await holding_service.add_holding(user_id, pid, _new())
    assert await holding_service.needs_snapshot(user_id, pid) is False
    assert await holding_service.get_last_snapshot_date(user_id, pid) == today


# --- asset details ---

async def test_asset_details_needs_no_portfolio(holding_service, gateway):
    gateway.set_quote("MSFT", "420", previous_close="400")
    quote = await holding_service.get_asset_details("msft")
    assert quote.symbol == "MSFT"
    assert quote.change == D("20")


async def test_asset_details_unavailable(holding_service, gateway):
    gateway.set_quote("MSFT", None)
    with pytest.raises(UpstreamUnavailableError):
        await holding_service.get_asset_details("MSFT")
