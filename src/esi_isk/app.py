"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from esi_isk.adapters.esi import EsiAffiliationProvider, EsiClient, EsiNameResolver
from esi_isk.adapters.jsonl import JsonlTransferSource
from esi_isk.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    is_started,
    startup,
)
from esi_isk.config import get_esi_config, get_ledger_config
from esi_isk.domain.details import character_details
from esi_isk.domain.ledger import (
    EvictionResult,
    RecordTransfersResult,
    evict_expired,
    record_transfers,
    set_good_standing,
)
from esi_isk.domain.ports.unit_of_work import LedgerUnitOfWork

if TYPE_CHECKING:
    from esi_isk.domain.model import CharacterDetails, LedgerRow
    from esi_isk.domain.ports.resolution import AffiliationProvider, NameResolver
    from esi_isk.domain.ports.sources import TransferSource

UnitOfWorkFactory = Callable[[], LedgerUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def ingest_transfers(
    *,
    path: Path | str | None = None,
    source: TransferSource | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    affiliation_provider: AffiliationProvider | None = None,
) -> RecordTransfersResult:
    """Record a batch of transfers from ``source`` (or a JSON-lines file at ``path``)."""

    if source is None and path is None:
        raise ValueError("Either a transfer source or a file path is required")

    # mappers must be in place before the source builds mapped entities
    _ensure_started()
    effective_source = source or JsonlTransferSource(Path(path or ""))
    effective_uow = unit_of_work_factory or SqlAlchemyLedgerUnitOfWork
    effective_provider = affiliation_provider or EsiAffiliationProvider(
        EsiClient(config=get_esi_config())
    )

    transfers = effective_source()
    log.info("Starting ingest of %s transfer(s)", len(transfers))
    return record_transfers(
        transfers,
        unit_of_work_factory=effective_uow,
        affiliation_provider=effective_provider,
    )


def evict_window(
    *,
    window_days: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> EvictionResult:
    """Subtract events that have aged out of the trailing window."""

    days = window_days if window_days is not None else get_ledger_config().window_days
    if days <= 0:
        raise ValueError("Window days must be positive")

    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyLedgerUnitOfWork
    log.info("Starting window eviction: window_days=%s", days)
    return evict_expired(unit_of_work_factory=effective_uow, window=timedelta(days=days))


def show_character(
    character_id: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    name_resolver: NameResolver | None = None,
) -> CharacterDetails:
    """Load the read-facing view of one character."""

    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyLedgerUnitOfWork
    effective_resolver = name_resolver or EsiNameResolver(EsiClient(config=get_esi_config()))
    return character_details(
        character_id,
        unit_of_work_factory=effective_uow,
        name_resolver=effective_resolver,
    )


def update_standing(
    character_id: int,
    *,
    good_standing: bool,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> LedgerRow:
    """Set the good standing flag of a known character."""

    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyLedgerUnitOfWork
    row = set_good_standing(character_id, good_standing, unit_of_work_factory=effective_uow)
    log.info("Character %s good_standing=%s", character_id, good_standing)
    return row
