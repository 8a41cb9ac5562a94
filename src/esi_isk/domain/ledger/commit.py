"""Persist the rows of a batch with best-effort semantics."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from esi_isk.domain.errors import LedgerCommitError, LedgerPersistenceError

if TYPE_CHECKING:
    from esi_isk.domain.ports.persistence import LedgerRowRepository

    from .batch import LedgerBatch

log = getLogger(__name__)


@dataclass(slots=True)
class CommitResult:
    """Outcome of writing one batch of ledger rows."""

    inserted: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @property
    def error(self) -> LedgerCommitError | None:
        if not self.failed:
            return None
        return LedgerCommitError(self.failed)

    def raise_for_failures(self) -> None:
        error = self.error
        if error is not None:
            raise error


def commit_rows(batch: LedgerBatch, repository: LedgerRowRepository) -> CommitResult:
    """Insert new rows and update existing ones, continuing past failed rows.

    A failed row never blocks or undoes the others. Failed ids are collected in
    the result; callers surface them through :attr:`CommitResult.error` once the
    surrounding unit of work has been committed.
    """

    new_rows = batch.new_rows()
    existing_rows = batch.existing_rows()
    result = CommitResult()

    for row in new_rows:
        try:
            repository.insert(row)
        except LedgerPersistenceError:
            log.exception("Failed to save new character %s", row.character_id)
            result.failed.append(row.character_id)
        else:
            result.inserted.append(row.character_id)

    for row in existing_rows:
        try:
            repository.update(row)
        except LedgerPersistenceError:
            log.exception("Failed to save updated character %s", row.character_id)
            result.failed.append(row.character_id)
        else:
            result.updated.append(row.character_id)

    log.debug(
        "Committed ledger batch: inserted=%s, updated=%s, failed=%s",
        len(result.inserted),
        len(result.updated),
        len(result.failed),
    )
    return result
