"""Snapshot store interface.

SnapshotRepository is a time-series interface keyed by
(portfolio_id, snapshot_date): rows are never deleted and are only ever
changed through upsert().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date
from uuid import UUID

from src.domain.models.snapshots import HoldingValue, PortfolioSnapshot


class SnapshotRepository(ABC):
    """Read/upsert interface for per-date portfolio snapshots."""

    @abstractmethod
    async def find(self, portfolio_id: UUID, snapshot_date: date) -> PortfolioSnapshot | None:
        """Return the snapshot for the pair, or None when none has been recorded."""

    @abstractmethod
    async def upsert(
        self,
        portfolio_id: UUID,
        snapshot_date: date,
        patch: Mapping[str, HoldingValue],
    ) -> PortfolioSnapshot:
        """Create the row if absent, then merge patch into it.

        Merge semantics are PortfolioSnapshot.merged(): patched symbols are
        replaced and total_value is re-summed.  Implementations must make the
        whole read-merge-write atomic per (portfolio_id, snapshot_date).
        This is the only mutation path for snapshots.
        """

    @abstractmethod
    async def range(
        self, portfolio_id: UUID, start: date, end: date
    ) -> list[PortfolioSnapshot]:
        """Return snapshots with start <= snapshot_date <= end, ascending by date."""

    @abstractmethod
    async def get_latest_date(self, portfolio_id: UUID) -> date | None:
        """Return the most recent snapshot_date for the portfolio, or None."""
