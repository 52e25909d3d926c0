"""Tests for src/domain/gateways.py."""

import asyncio
from decimal import Decimal

import pytest

from src.domain.gateways import PriceDataGateway
from src.domain.models.market_data import Quote


def _gateway(quote):
    class _Impl(PriceDataGateway):
        async def get_current_quote(self, symbol): return quote
        async def get_historical_series(self, symbol, start, end): return []

    return _Impl()


def test_gateway_is_abstract():
    with pytest.raises(TypeError):
        PriceDataGateway()  # type: ignore[abstract]


def test_current_price_derives_from_quote():
    quote = Quote(symbol="AAPL", current_price=Decimal("12.5"))
    assert asyncio.run(_gateway(quote).get_current_price("AAPL")) == Decimal("12.5")


def test_current_price_none_without_quote():
    assert asyncio.run(_gateway(None).get_current_price("AAPL")) is None


def test_current_prices_covers_every_symbol_once():
    class _ByPrice(PriceDataGateway):
        def __init__(self):
            self.asked = []

        async def get_current_quote(self, symbol):
            self.asked.append(symbol)
            if symbol == "MSFT":
                return None
            return Quote(symbol=symbol, current_price=Decimal("2"))

        async def get_historical_series(self, symbol, start, end): return []

    gateway = _ByPrice()
    prices = asyncio.run(gateway.get_current_prices(["AAPL", "MSFT", "AAPL"]))
    assert prices == {"AAPL": Decimal("2"), "MSFT": None}
    assert sorted(gateway.asked) == ["AAPL", "MSFT"]
