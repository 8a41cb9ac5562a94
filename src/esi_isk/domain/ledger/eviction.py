"""Age events out of the trailing window.

The sweep keeps a watermark (the window start as of the previous run) so every
event is subtracted exactly once: a run only reverses events with
``watermark <= timestamp < new window start`` and then moves the watermark.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from esi_isk.domain.time_windows import DEFAULT_WINDOW_DAYS, trailing_window_start, utcnow

from .accumulator import apply_transfers
from .binder import load_participants
from .commit import CommitResult, commit_rows

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from esi_isk.domain.model import Transfer
    from esi_isk.domain.ports.unit_of_work import LedgerUnitOfWork
    from esi_isk.domain.time_windows import Clock

log = getLogger(__name__)


@dataclass(slots=True)
class EvictionResult:
    window_start: datetime
    previous_window_start: datetime | None
    donations: int = 0
    contracts: int = 0
    commit: CommitResult = field(default_factory=CommitResult)


def evict_expired(
    *,
    unit_of_work_factory: Callable[[], LedgerUnitOfWork],
    window: timedelta = timedelta(days=DEFAULT_WINDOW_DAYS),
    clock: Clock = utcnow,
) -> EvictionResult:
    """Subtract every event that left the trailing window since the last sweep."""

    cutoff = trailing_window_start(window, clock=clock)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        previous = repositories.state.window_start()
        result = EvictionResult(window_start=cutoff, previous_window_start=previous)

        if previous is not None and previous >= cutoff:
            log.info("Window start %s already swept, nothing to evict", previous.isoformat())
            result.window_start = previous
            return result

        donations = list(repositories.donations.between(previous, cutoff))
        contracts = [
            contract
            for contract in repositories.contracts.between(previous, cutoff)
            if contract.accepted
        ]
        events: list[Transfer] = [*donations, *contracts]

        ledger = load_participants(events, repositories.ledger_rows)
        result.donations = apply_transfers(donations, ledger, addition=False)
        result.contracts = apply_transfers(contracts, ledger, addition=False)
        result.commit = commit_rows(ledger, repositories.ledger_rows)

        # TODO: keep per-event eviction markers so rows that failed here can be retried
        repositories.state.set_window_start(cutoff)
        uow.commit()

    log.info(
        "Evicted events before %s: donations=%s, contracts=%s, rows=%s, failed=%s",
        cutoff.isoformat(),
        result.donations,
        result.contracts,
        len(result.commit.updated),
        len(result.commit.failed),
    )
    result.commit.raise_for_failures()
    return result
