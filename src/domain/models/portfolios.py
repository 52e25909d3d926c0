"""Portfolio and holding domain models.

A Holding is one purchase lot.  It is immutable once recorded: the purchase
price is authoritative and is never re-derived from market data.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalise_symbol(symbol: str) -> str:
    cleaned = symbol.strip().upper()
    if not cleaned:
        raise ValueError("symbol must not be blank")
    return cleaned


class Portfolio(BaseModel):
    model_config = ConfigDict(frozen=True)

    portfolio_id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    name: str
    starting_balance: Decimal = Decimal("0")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NewHolding(BaseModel):
    """Caller input for recording a purchase.

    bought_at_date defaults to None, meaning "today" in the valuation calendar.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    shares: Decimal = Field(gt=0)
    bought_at_price: Decimal = Field(gt=0)
    bought_at_date: date | None = None

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, v: str) -> str:
        return normalise_symbol(v)


class Holding(BaseModel):
    model_config = ConfigDict(frozen=True)

    holding_id: UUID = Field(default_factory=uuid4)
    portfolio_id: UUID
    symbol: str
    shares: Decimal = Field(gt=0)
    bought_at_price: Decimal = Field(gt=0)
    bought_at_date: date
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, v: str) -> str:
        return normalise_symbol(v)

    @property
    def cost(self) -> Decimal:
        return self.shares * self.bought_at_price


class HoldingSummary(BaseModel):
    """All lots of one symbol in a portfolio, collapsed into a single line."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    total_shares: Decimal
    total_cost: Decimal
    average_cost: Decimal
    lot_count: int
    first_bought_at: date
    last_bought_at: date

    @classmethod
    def from_lots(cls, lots: list[Holding]) -> HoldingSummary:
        """Aggregate lots that share one symbol.

        Raises ValueError when lots is empty or mixes symbols.
        """
        if not lots:
            raise ValueError("Cannot summarise an empty list of lots")
        symbols = {lot.symbol for lot in lots}
        if len(symbols) != 1:
            raise ValueError(f"Lots must share one symbol, got {sorted(symbols)}")
        total_shares = sum((lot.shares for lot in lots), Decimal("0"))
        total_cost = sum((lot.cost for lot in lots), Decimal("0"))
        dates = [lot.bought_at_date for lot in lots]
        return cls(
            symbol=lots[0].symbol,
            total_shares=total_shares,
            total_cost=total_cost,
            average_cost=total_cost / total_shares,
            lot_count=len(lots),
            first_bought_at=min(dates),
            last_bought_at=max(dates),
        )
