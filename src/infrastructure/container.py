"""Process-level wiring.

Container owns the two long-lived resources (database engine and HTTP
client).  Call open() at process start and close() at shutdown; in between,
holding_service() yields a HoldingService bound to one transactional session.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date

import httpx

from src.domain.services.holdings import HoldingService
from src.domain.services.valuation import ValuationEngine, utc_today
from src.infrastructure.config import Settings
from src.infrastructure.database import Database
from src.infrastructure.market_data.gateway import HttpPriceDataGateway
from src.infrastructure.persistence.repositories import get_repositories

logger = logging.getLogger(__name__)


class Container:
    def __init__(self, settings: Settings, clock: Callable[[], date] = utc_today) -> None:
        self.settings = settings
        self.database = Database(settings.database_url, echo=settings.database_echo)
        self._clock = clock
        self._http: httpx.AsyncClient | None = None
        self._gateway: HttpPriceDataGateway | None = None

    @property
    def gateway(self) -> HttpPriceDataGateway:
        if self._gateway is None:
            raise RuntimeError("Container is not open; call open() first")
        return self._gateway

    def open(self) -> None:
        if self._http is not None:
            return
        self.database.open()
        self._http = httpx.AsyncClient(timeout=self.settings.price_request_timeout)
        self._gateway = HttpPriceDataGateway.from_settings(self._http, self.settings)
        logger.info("Container opened")

    async def close(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
            self._gateway = None
        await self.database.close()
        logger.info("Container closed")

    async def __aenter__(self) -> Container:
        self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @asynccontextmanager
    async def holding_service(self) -> AsyncIterator[HoldingService]:
        """Yield a service whose writes commit together or not at all."""
        gateway = self.gateway
        async with self.database.session() as session:
            repos = get_repositories(session)
            engine = ValuationEngine(repos.snapshots, gateway, clock=self._clock)
            yield HoldingService(repos.portfolios, repos.holdings, engine)
