"""Portfolio snapshot domain models.

A PortfolioSnapshot is the aggregate for one (portfolio_id, snapshot_date)
pair.  holdings_data maps each symbol to its latest known contribution for
that date, and total_value is always the sum of those contributions.

merged() is the only way a snapshot changes: the patch replaces the
sub-entries of the symbols it names, then total_value is recomputed from the
whole map.  Applying the same patch twice therefore yields the same snapshot,
and contributions for different symbols commute.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Scale of portfolio_snapshots.total_value; values are rounded to it before
# they are summed so the stored total matches the stored entries.
VALUE_SCALE = 8
VALUE_QUANTUM = Decimal(1).scaleb(-VALUE_SCALE)


class HoldingValue(BaseModel):
    """One symbol's contribution to a snapshot: value = price × shares."""

    model_config = ConfigDict(frozen=True)

    price: Decimal = Field(gt=0)
    shares: Decimal = Field(gt=0)
    value: Decimal = Field(ge=0)

    @classmethod
    def priced(cls, price: Decimal, shares: Decimal) -> HoldingValue:
        value = (price * shares).quantize(VALUE_QUANTUM, rounding=ROUND_HALF_UP)
        return cls(price=price, shares=shares, value=value)


def total_of(holdings: Mapping[str, HoldingValue]) -> Decimal:
    return sum((h.value for h in holdings.values()), Decimal("0"))


class PortfolioSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    portfolio_id: UUID
    snapshot_date: date
    total_value: Decimal = Decimal("0")
    holdings_data: dict[str, HoldingValue] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def empty(cls, portfolio_id: UUID, snapshot_date: date) -> PortfolioSnapshot:
        return cls(portfolio_id=portfolio_id, snapshot_date=snapshot_date)

    def merged(self, patch: Mapping[str, HoldingValue]) -> PortfolioSnapshot:
        """Return a copy with patch entries replacing same-symbol entries.

        total_value is re-summed over the merged map; it is never
        incremented from the previous total.
        """
        holdings = {**self.holdings_data, **patch}
        return PortfolioSnapshot(
            portfolio_id=self.portfolio_id,
            snapshot_date=self.snapshot_date,
            total_value=total_of(holdings),
            holdings_data=holdings,
        )


class ChartPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    total_value: Decimal

    @classmethod
    def from_snapshot(cls, snapshot: PortfolioSnapshot) -> ChartPoint:
        return cls(date=snapshot.snapshot_date, total_value=snapshot.total_value)
