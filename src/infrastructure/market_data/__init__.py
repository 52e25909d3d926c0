"""Market data providers and the HTTP price data gateway."""

from .finnhub import FinnhubQuoteClient
from .gateway import HttpPriceDataGateway
from .twelve_data import TwelveDataSeriesClient

__all__ = ["FinnhubQuoteClient", "TwelveDataSeriesClient", "HttpPriceDataGateway"]
