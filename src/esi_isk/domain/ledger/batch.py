"""Row set owned by a single aggregation call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from esi_isk.domain.errors import MissingAffiliationError

if TYPE_CHECKING:
    from esi_isk.domain.model import LedgerRow


@dataclass(slots=True)
class LedgerBatch:
    """Ledger rows touched by one batch, keyed by character id.

    Rows are only ever reached through their character id; whether a row is
    new (insert) or existing (update) is decided when it enters the batch.
    """

    rows: dict[int, LedgerRow] = field(default_factory=dict)
    new_ids: set[int] = field(default_factory=set)

    def __contains__(self, character_id: object) -> bool:
        return character_id in self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def add(self, row: LedgerRow, *, is_new: bool) -> None:
        if row.character_id in self.rows:
            raise ValueError(f"character {row.character_id} is already part of this batch")
        self.rows[row.character_id] = row
        if is_new:
            self.new_ids.add(row.character_id)

    def row(self, character_id: int) -> LedgerRow:
        try:
            return self.rows[character_id]
        except KeyError:
            raise MissingAffiliationError(character_id) from None

    def is_new(self, character_id: int) -> bool:
        return character_id in self.new_ids

    def new_rows(self) -> list[LedgerRow]:
        return [row for character_id, row in self.rows.items() if character_id in self.new_ids]

    def existing_rows(self) -> list[LedgerRow]:
        return [row for character_id, row in self.rows.items() if character_id not in self.new_ids]
