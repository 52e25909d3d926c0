"""Snapshot layer ORM model: portfolio_snapshots."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.domain.models.snapshots import VALUE_SCALE
from src.infrastructure.database import Base


class PortfolioSnapshot(Base):
    """Aggregate portfolio value for one portfolio on one calendar date.

    Unique on (portfolio_id, snapshot_date); the repository relies on that
    constraint for its insert-if-absent step.

    holdings_data is a JSONB document {symbol: {price, shares, value}} with
    decimals encoded as strings.  total_value is the sum of the values and is
    recomputed from the whole document on every write.
    """

    __tablename__ = "portfolio_snapshots"
    __table_args__ = (
        UniqueConstraint(
            "portfolio_id", "snapshot_date", name="uq_portfolio_snapshots_portfolio_date"
        ),
    )

    snapshot_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    portfolio_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("portfolios.portfolio_id", ondelete="CASCADE"),
        nullable=False,
    )
    snapshot_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_value: Mapped[Decimal] = mapped_column(
        Numeric(24, VALUE_SCALE), nullable=False, server_default="0"
    )
    holdings_data: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, server_default="{}"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    portfolio: Mapped["Portfolio"] = relationship(back_populates="snapshots")
