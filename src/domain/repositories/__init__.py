"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations live in src/infrastructure/persistence/.

Import from this package rather than individual modules to avoid coupling
services to specific repository module paths.
"""

from .holdings import HoldingRepository
from .portfolios import PortfolioRepository
from .snapshots import SnapshotRepository

__all__ = [
    "HoldingRepository",
    "PortfolioRepository",
    "SnapshotRepository",
]
