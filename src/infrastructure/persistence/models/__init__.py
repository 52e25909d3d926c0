"""ORM model registry — imports all layer modules so every mapper class is
registered with Base.metadata before Alembic or SQLAlchemy runs.

Import order follows the dependency graph (referenced tables first).
"""

from src.infrastructure.persistence.models.portfolios import Holding, Portfolio
from src.infrastructure.persistence.models.snapshots import PortfolioSnapshot

__all__ = [
    # Portfolios
    "Portfolio",
    "Holding",
    # Snapshots
    "PortfolioSnapshot",
]
