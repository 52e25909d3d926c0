"""Historical daily-close client for a Twelve Data-compatible /time_series endpoint.

Success payload:
    {"meta": {...}, "values": [{"datetime": "2024-01-02", "close": "185.64", ...}], "status": "ok"}
Error payload (often with HTTP 200):
    {"code": 400, "message": "...", "status": "error"}

Historical feeds typically lag by a trading day, so the series may stop
before the requested end date.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx
from pydantic import ValidationError

from src.domain.models.market_data import PricePoint

logger = logging.getLogger(__name__)


class TwelveDataSeriesClient:
    def __init__(self, client: httpx.AsyncClient, api_key: str, base_url: str) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def fetch_daily_closes(self, symbol: str, start: date, end: date) -> list[PricePoint]:
        """Return closes within [start, end] ascending and unique by date; [] on any failure."""
        url = f"{self._base_url}/time_series"
        params = {
            "symbol": symbol,
            "interval": "1day",
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "order": "ASC",
            "apikey": self._api_key,
        }
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException:
            logger.warning("Time series request for %s timed out", symbol)
            return []
        except httpx.HTTPError as exc:
            logger.warning("Time series request for %s failed: %s", symbol, exc)
            return []

        if not response.is_success:
            logger.error("Failed to fetch time series for %s: HTTP %s", symbol, response.status_code)
            return []

        try:
            data: Any = response.json()
        except ValueError:
            logger.error("Time series response for %s is not JSON", symbol)
            return []

        if not isinstance(data, dict) or data.get("status") == "error":
            message = data.get("message") if isinstance(data, dict) else data
            logger.warning("Time series unavailable for %s: %s", symbol, message)
            return []

        values = data.get("values") or []
        if not isinstance(values, list):
            logger.error("Invalid time series payload for %s: %r", symbol, values)
            return []

        by_date: dict[date, PricePoint] = {}
        for row in values:
            point = self._parse_row(symbol, row)
            if point is not None and start <= point.date <= end:
                by_date[point.date] = point
        return [by_date[d] for d in sorted(by_date)]

    @staticmethod
    def _parse_row(symbol: str, row: Any) -> PricePoint | None:
        if not isinstance(row, dict):
            logger.warning("Skipping malformed %s row: %r", symbol, row)
            return None
        # Daily rows carry a bare date; guard against "YYYY-MM-DD HH:MM:SS" anyway.
        raw_date = str(row.get("datetime", ""))[:10]
        try:
            return PricePoint(date=date.fromisoformat(raw_date), price=row.get("close"))
        except (ValueError, ValidationError):
            logger.warning("Skipping malformed %s row: %r", symbol, row)
            return None
