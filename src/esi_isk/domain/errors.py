"""Errors raised by the ledger core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class LedgerError(RuntimeError):
    """Base class for ledger failures."""


class MissingAffiliationError(LedgerError):
    """An event references a character the batch has no affiliation for.

    The event source and the affiliation provider disagree; the batch is aborted.
    """

    def __init__(self, character_id: int) -> None:
        super().__init__(f"no affiliation found for character {character_id}")
        self.character_id = character_id


class CharacterNotFoundError(LedgerError):
    def __init__(self, character_id: int) -> None:
        super().__init__(f"character {character_id} not found")
        self.character_id = character_id


class LedgerPersistenceError(LedgerError):
    """Raised by repositories when a single ledger row could not be written."""

    def __init__(self, character_id: int, message: str | None = None) -> None:
        super().__init__(message or f"failed to persist character {character_id}")
        self.character_id = character_id


class LedgerCommitError(LedgerError):
    """Aggregate error for a batch where one or more rows failed to persist."""

    def __init__(self, failed_ids: Iterable[int]) -> None:
        self.failed_ids: tuple[int, ...] = tuple(failed_ids)
        joined = ", ".join(str(character_id) for character_id in self.failed_ids)
        super().__init__(f"failed to save character(s): {joined}")


class TransferHistoryError(LedgerError):
    """Stored history rejected a batch of transfers, e.g. a key another writer already used."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"failed to store {kind} history")
        self.kind = kind
