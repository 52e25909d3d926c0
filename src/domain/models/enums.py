"""Domain enumerations.

String-valued enums use the str mixin so they serialise cleanly to JSON and
remain comparable to plain strings.
"""

from datetime import timedelta
from enum import Enum


class TimeRange(str, Enum):
    """Preset chart windows, each ending on the current day."""

    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"

    @property
    def lookback(self) -> timedelta:
        """Distance from the window start to its (inclusive) end date."""
        return {
            TimeRange.ONE_DAY: timedelta(days=1),
            TimeRange.ONE_WEEK: timedelta(weeks=1),
            TimeRange.ONE_MONTH: timedelta(days=30),
            TimeRange.THREE_MONTHS: timedelta(days=91),
            TimeRange.SIX_MONTHS: timedelta(days=182),
            TimeRange.ONE_YEAR: timedelta(days=365),
            TimeRange.FIVE_YEARS: timedelta(days=5 * 365),
        }[self]
