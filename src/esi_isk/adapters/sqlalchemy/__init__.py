"""SQLAlchemy adapter package for esi-isk."""

from __future__ import annotations

from .mappings import (
    ISKAmount,
    UTCDateTime,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyContractRepository,
    SqlAlchemyDonationRepository,
    SqlAlchemyLedgerRowRepository,
    SqlAlchemyLedgerStateRepository,
)
from .unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    StartupError,
    create_database_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "ISKAmount",
    "SqlAlchemyContractRepository",
    "SqlAlchemyDonationRepository",
    "SqlAlchemyLedgerRowRepository",
    "SqlAlchemyLedgerStateRepository",
    "SqlAlchemyLedgerUnitOfWork",
    "StartupError",
    "UTCDateTime",
    "create_database_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
