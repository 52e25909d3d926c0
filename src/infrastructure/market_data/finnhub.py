"""Current-quote client for a Finnhub-compatible /quote endpoint.

Payload: {"c": current, "pc": previous close, "d": ..., "dp": ..., ...}.
Finnhub answers unknown symbols with zeros rather than an error, so a
non-positive current price is treated as "no quote".
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from src.domain.models.market_data import Quote

logger = logging.getLogger(__name__)


class FinnhubQuoteClient:
    def __init__(self, client: httpx.AsyncClient, api_key: str, base_url: str) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def fetch_quote(self, symbol: str) -> Quote | None:
        url = f"{self._base_url}/quote"
        params = {"symbol": symbol, "token": self._api_key}
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException:
            logger.warning("Quote request for %s timed out", symbol)
            return None
        except httpx.HTTPError as exc:
            logger.warning("Quote request for %s failed: %s", symbol, exc)
            return None

        if not response.is_success:
            logger.error("Failed to fetch quote for %s: HTTP %s", symbol, response.status_code)
            return None

        try:
            data: Any = response.json()
        except ValueError:
            logger.error("Quote response for %s is not JSON", symbol)
            return None

        if not isinstance(data, dict) or data.get("c") is None:
            logger.error("Invalid quote data for %s: %r", symbol, data)
            return None

        try:
            return Quote(symbol=symbol, current_price=data["c"], previous_close=data.get("pc"))
        except ValidationError:
            logger.warning("Unusable quote for %s: %r", symbol, data)
            return None
