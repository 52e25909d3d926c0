"""Domain model package.

All domain objects are pure Pydantic models with no ORM or infrastructure
dependencies.  Import from this package to avoid coupling application code to
individual module paths.
"""

from .enums import TimeRange
from .market_data import PricePoint, Quote
from .portfolios import Holding, HoldingSummary, NewHolding, Portfolio, normalise_symbol
from .snapshots import ChartPoint, HoldingValue, PortfolioSnapshot, total_of

__all__ = [
    # enums
    "TimeRange",
    # market data
    "PricePoint",
    "Quote",
    # portfolios
    "Portfolio",
    "Holding",
    "HoldingSummary",
    "NewHolding",
    "normalise_symbol",
    # snapshots
    "HoldingValue",
    "PortfolioSnapshot",
    "ChartPoint",
    "total_of",
]
