"""Batch entry points for updating character totals."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from esi_isk.domain.errors import CharacterNotFoundError
from esi_isk.domain.model import index_affiliations

from .accumulator import apply_transfers
from .batch import LedgerBatch
from .binder import bind_participants, participant_ids
from .commit import CommitResult, commit_rows

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from esi_isk.domain.model import Affiliation, Contract, Donation, LedgerRow, Transfer
    from esi_isk.domain.ports.persistence import LedgerRowRepository, TransferRepository
    from esi_isk.domain.ports.resolution import AffiliationProvider
    from esi_isk.domain.ports.sources import TransferBatch
    from esi_isk.domain.ports.unit_of_work import LedgerUnitOfWork

log = getLogger(__name__)


def aggregate_transfers(
    events: Sequence[Transfer],
    affiliations: Mapping[int, Affiliation],
    repository: LedgerRowRepository,
    *,
    addition: bool = True,
    batch: LedgerBatch | None = None,
) -> LedgerBatch:
    """Bind participants and apply ``events`` to their rows in memory."""

    ledger = bind_participants(events, affiliations, repository, batch=batch)
    apply_transfers(events, ledger, addition=addition)
    return ledger


def save_character_donations(
    donations: Sequence[Donation],
    affiliations: Mapping[int, Affiliation],
    repository: LedgerRowRepository,
    *,
    addition: bool = True,
) -> CommitResult:
    """Update all totals touched by ``donations`` and write the rows."""

    ledger = aggregate_transfers(donations, affiliations, repository, addition=addition)
    return commit_rows(ledger, repository)


def save_character_contracts(
    contracts: Sequence[Contract],
    affiliations: Mapping[int, Affiliation],
    repository: LedgerRowRepository,
    *,
    addition: bool = True,
) -> CommitResult:
    """Update all totals touched by accepted ``contracts`` and write the rows."""

    ledger = aggregate_transfers(contracts, affiliations, repository, addition=addition)
    return commit_rows(ledger, repository)


@dataclass(slots=True)
class RecordTransfersResult:
    """Outcome of recording one batch of transfers."""

    donations: int = 0
    contracts: int = 0
    skipped: int = 0
    evicted: int = 0
    commit: CommitResult = field(default_factory=CommitResult)


def record_transfers(
    transfers: TransferBatch,
    *,
    unit_of_work_factory: Callable[[], LedgerUnitOfWork],
    affiliation_provider: AffiliationProvider,
) -> RecordTransfersResult:
    """Store new transfers and fold them into the ledger in one unit of work.

    Events already stored (or repeated within the batch) are skipped. Events older
    than the current window start are subtracted again right away so the window
    totals only ever reflect events the eviction sweep has not passed yet.
    Raises ``TransferHistoryError`` without committing anything when the history
    rejects an event, and ``LedgerCommitError`` after committing when some rows
    failed.
    """

    result = RecordTransfersResult()

    with unit_of_work_factory() as uow:
        repositories = uow.repositories

        donations = _filter_new(
            transfers.donations,
            key=_donation_key,
            repository=repositories.donations,
        )
        accepted = [contract for contract in transfers.contracts if contract.accepted]
        contracts = _filter_new(
            accepted,
            key=_contract_key,
            repository=repositories.contracts,
        )
        result.skipped = len(transfers) - len(donations) - len(contracts)

        if not donations and not contracts:
            log.info("No new transfers to record (skipped=%s)", result.skipped)
            return result

        events: list[Transfer] = [*donations, *contracts]
        participants = participant_ids(events)
        affiliations = index_affiliations(affiliation_provider(participants))

        ledger = aggregate_transfers(events, affiliations, repositories.ledger_rows)

        window_start = repositories.state.window_start()
        if window_start is not None:
            stale = [event for event in events if event.timestamp < window_start]
            result.evicted = apply_transfers(stale, ledger, addition=False)

        # history conflicts abort the whole batch before any ledger row is written
        _store_history(donations, repositories.donations)
        _store_history(contracts, repositories.contracts)

        result.donations = len(donations)
        result.contracts = len(contracts)
        result.commit = commit_rows(ledger, repositories.ledger_rows)
        uow.commit()

    log.info(
        "Recorded transfers: donations=%s, contracts=%s, skipped=%s, evicted=%s, "
        "inserted=%s, updated=%s, failed=%s",
        result.donations,
        result.contracts,
        result.skipped,
        result.evicted,
        len(result.commit.inserted),
        len(result.commit.updated),
        len(result.commit.failed),
    )
    result.commit.raise_for_failures()
    return result


def set_good_standing(
    character_id: int,
    good_standing: bool,
    *,
    unit_of_work_factory: Callable[[], LedgerUnitOfWork],
) -> LedgerRow:
    """Flag a known character as being in good standing (or not)."""

    with unit_of_work_factory() as uow:
        rows = uow.repositories.ledger_rows
        row = rows.get(character_id)
        if row is None:
            raise CharacterNotFoundError(character_id)
        row.good_standing = good_standing
        rows.update(row)
        uow.commit()
    return row


def _donation_key(donation: Donation) -> int:
    return donation.ref_id


def _contract_key(contract: Contract) -> int:
    return contract.contract_id


def _filter_new[TTransfer](
    events: Iterable[TTransfer],
    *,
    key: Callable[[TTransfer], int],
    repository: TransferRepository[TTransfer],
) -> list[TTransfer]:
    fresh: list[TTransfer] = []
    seen: set[int] = set()
    for event in events:
        event_key = key(event)
        if event_key in seen:
            continue
        seen.add(event_key)
        if repository.exists(event_key):
            continue
        fresh.append(event)
    return fresh


def _store_history[TTransfer](
    events: Iterable[TTransfer],
    repository: TransferRepository[TTransfer],
) -> None:
    for event in events:
        repository.add(event)
    repository.flush()
