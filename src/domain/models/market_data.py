"""Market data value objects returned by the price data gateway.

Quote     — a current quote: latest price and the previous session's close.
PricePoint — one daily close (or today's live price) for a symbol.

Neither is persisted; both are immutable.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    """Current quote for one symbol.

    previous_close may be missing from the provider payload; change and
    change_percent are then None.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    current_price: Decimal = Field(gt=0)
    previous_close: Decimal | None = None

    @property
    def change(self) -> Decimal | None:
        if self.previous_close is None:
            return None
        return self.current_price - self.previous_close

    @property
    def change_percent(self) -> Decimal | None:
        if not self.previous_close:
            return None
        pct = (self.current_price - self.previous_close) / self.previous_close * 100
        return pct.quantize(Decimal("0.01"))


class PricePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    price: Decimal = Field(gt=0)
