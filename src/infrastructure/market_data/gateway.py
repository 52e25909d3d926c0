"""HTTP-backed PriceDataGateway combining the quote and series providers."""

from __future__ import annotations

from datetime import date

import httpx

from src.domain.gateways import PriceDataGateway
from src.domain.models.market_data import PricePoint, Quote
from src.infrastructure.config import Settings

from .finnhub import FinnhubQuoteClient
from .twelve_data import TwelveDataSeriesClient


class HttpPriceDataGateway(PriceDataGateway):
    """Routes current quotes to one provider and daily history to the other.

    The httpx client is owned by the caller, which opens it at startup and
    closes it at shutdown.
    """

    def __init__(self, quotes: FinnhubQuoteClient, series: TwelveDataSeriesClient) -> None:
        self._quotes = quotes
        self._series = series

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> HttpPriceDataGateway:
        return cls(
            quotes=FinnhubQuoteClient(client, settings.finnhub_api_key, settings.finnhub_base_url),
            series=TwelveDataSeriesClient(
                client, settings.twelve_data_api_key, settings.twelve_data_base_url
            ),
        )

    async def get_current_quote(self, symbol: str) -> Quote | None:
        return await self._quotes.fetch_quote(symbol)

    async def get_historical_series(
        self, symbol: str, start: date, end: date
    ) -> list[PricePoint]:
        if start > end:
            return []
        return await self._series.fetch_daily_closes(symbol, start, end)
