"""Typed failures raised by the valuation domain.

Every error carries a stable ``code`` so the (external) controller layer can
map it to a response without string matching on messages.
"""

from __future__ import annotations


class ValuationError(Exception):
    """Base class for all valuation-domain failures."""

    code = "VALUATION_ERROR"


class PortfolioNotFoundError(ValuationError):
    """Portfolio does not exist or is not owned by the requesting user."""

    code = "NOT_FOUND"


class UpstreamUnavailableError(ValuationError):
    """A price provider returned no usable data.  The caller may retry later."""

    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, symbol: str, detail: str = "price service unavailable") -> None:
        super().__init__(f"{detail} for {symbol}")
        self.symbol = symbol


class NoHistoricalDataError(ValuationError):
    """The historical provider has no data points for the requested range.

    Distinct from UpstreamUnavailableError: the symbol may be too new or
    delisted, which retrying will not fix.
    """

    code = "NO_HISTORICAL_DATA"

    def __init__(self, symbol: str) -> None:
        super().__init__(f"no historical data for {symbol}")
        self.symbol = symbol


class InconsistentAggregateError(ValuationError):
    """A stored snapshot's holdings map cannot be read back as numeric entries."""

    code = "INCONSISTENT_AGGREGATE"


class InvalidContributionError(ValuationError):
    """A contribution was requested for a date its entry point does not accept."""

    code = "VALIDATION_ERROR"
