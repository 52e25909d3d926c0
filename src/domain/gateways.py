"""Price data gateway interface.

The gateway hides two upstream providers with different strengths: one that
serves current quotes and one that serves historical daily closes.  Every
method fails soft.  None / [] means "no usable data right now"; the gateway
never raises for upstream failures and never retries.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from src.domain.models.market_data import PricePoint, Quote


class PriceDataGateway(ABC):
    @abstractmethod
    async def get_current_quote(self, symbol: str) -> Quote | None:
        """Return the current quote, or None when the provider is unavailable."""

    @abstractmethod
    async def get_historical_series(
        self, symbol: str, start: date, end: date
    ) -> list[PricePoint]:
        """Return daily closes within [start, end] ascending by date.

        An empty list is a valid answer (new or delisted symbol, provider
        error); it is never None.
        """

    async def get_current_price(self, symbol: str) -> Decimal | None:
        quote = await self.get_current_quote(symbol)
        return quote.current_price if quote else None

    async def get_current_prices(self, symbols: Iterable[str]) -> dict[str, Decimal | None]:
        """Fetch current prices for several symbols concurrently.

        Every requested symbol appears in the result; unavailable ones map to
        None.
        """
        unique = list(dict.fromkeys(symbols))
        prices = await asyncio.gather(*(self.get_current_price(s) for s in unique))
        return dict(zip(unique, prices))
