"""Tests for get_repositories() — the session-binding factory."""

from unittest.mock import AsyncMock

from src.infrastructure.persistence.repositories import (
    Repositories,
    SqlHoldingRepository,
    SqlPortfolioRepository,
    SqlSnapshotRepository,
    get_repositories,
)


def test_returns_repositories_dataclass():
    assert isinstance(get_repositories(AsyncMock()), Repositories)


def test_repository_types():
    repos = get_repositories(AsyncMock())
    assert isinstance(repos.portfolios, SqlPortfolioRepository)
    assert isinstance(repos.holdings, SqlHoldingRepository)
    assert isinstance(repos.snapshots, SqlSnapshotRepository)


def test_all_repositories_share_session():
    session = AsyncMock()
    repos = get_repositories(session)
    assert repos.snapshots._session is session
    assert repos.holdings._session is session
    assert repos.portfolios._session is session
