"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    ContractRepository,
    DonationRepository,
    LedgerRowRepository,
    LedgerStateRepository,
    TransferRepository,
)
from .resolution import AffiliationProvider, NameResolver
from .sources import TransferBatch, TransferSource
from .unit_of_work import (
    LedgerRepositories,
    LedgerUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AffiliationProvider",
    "ContractRepository",
    "DonationRepository",
    "LedgerRepositories",
    "LedgerRowRepository",
    "LedgerStateRepository",
    "LedgerUnitOfWork",
    "NameResolver",
    "RepositoryCollection",
    "TransferBatch",
    "TransferRepository",
    "TransferSource",
    "UnitOfWork",
]
