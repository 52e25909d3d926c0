"""Domain services package."""

from .holdings import HoldingService
from .valuation import ValuationEngine, utc_today

__all__ = ["HoldingService", "ValuationEngine", "utc_today"]
