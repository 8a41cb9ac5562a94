"""Per-character ledger rows."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Final

from .events import as_isk, as_utc
from .views import CharacterView

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

ZERO_ISK: Final[Decimal] = Decimal(0)
ISK_QUANTUM: Final[Decimal] = Decimal("0.01")

STORAGE_COLUMNS: Final[tuple[str, ...]] = (
    "character_id",
    "corporation_id",
    "alliance_id",
    "received",
    "received_isk",
    "received_30",
    "received_isk_30",
    "donated",
    "donated_isk",
    "donated_30",
    "donated_isk_30",
    "last_donated",
    "last_received",
    "good_standing",
)


def round_isk(value: Decimal) -> Decimal:
    return value.quantize(ISK_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(slots=True, kw_only=True)
class LedgerRow:
    """Running donation totals for one character.

    Monetary sums are kept at full precision; rounding only happens in
    :meth:`view`, so the accumulator never builds on a rounded value.
    """

    character_id: int
    corporation_id: int = 0
    alliance_id: int = 0

    received: int = 0
    received_isk: Decimal = ZERO_ISK
    received_30: int = 0
    received_isk_30: Decimal = ZERO_ISK

    donated: int = 0
    donated_isk: Decimal = ZERO_ISK
    donated_30: int = 0
    donated_isk_30: Decimal = ZERO_ISK

    last_donated: datetime | None = None
    last_received: datetime | None = None

    good_standing: bool = False

    @classmethod
    def from_storage(cls, values: Mapping[str, Any]) -> LedgerRow:
        """Build a row from a stored record (NULL timestamps become ``None``)."""

        def _int(key: str) -> int:
            value = values.get(key)
            return int(value) if value is not None else 0

        def _isk(key: str) -> Decimal:
            value = values.get(key)
            return as_isk(value) if value is not None else ZERO_ISK

        def _timestamp(key: str) -> datetime | None:
            value = values.get(key)
            return as_utc(value) if value is not None else None

        return cls(
            character_id=_int("character_id"),
            corporation_id=_int("corporation_id"),
            alliance_id=_int("alliance_id"),
            received=_int("received"),
            received_isk=_isk("received_isk"),
            received_30=_int("received_30"),
            received_isk_30=_isk("received_isk_30"),
            donated=_int("donated"),
            donated_isk=_isk("donated_isk"),
            donated_30=_int("donated_30"),
            donated_isk_30=_isk("donated_isk_30"),
            last_donated=_timestamp("last_donated"),
            last_received=_timestamp("last_received"),
            good_standing=bool(values.get("good_standing", False)),
        )

    def to_storage(self) -> dict[str, object]:
        """Return the column mapping used for inserts and updates."""

        return {column: getattr(self, column) for column in STORAGE_COLUMNS}

    def view(self, names: Mapping[int, str] | None = None) -> CharacterView:
        """Project the row into its read-facing form."""

        resolved = names or {}
        return CharacterView(
            character_id=self.character_id,
            name=resolved.get(self.character_id),
            corporation_id=self.corporation_id,
            corporation_name=resolved.get(self.corporation_id) if self.corporation_id else None,
            alliance_id=self.alliance_id,
            alliance_name=resolved.get(self.alliance_id) if self.alliance_id else None,
            received=self.received,
            received_isk=round_isk(self.received_isk),
            received_30=self.received_30,
            received_isk_30=round_isk(self.received_isk_30),
            donated=self.donated,
            donated_isk=round_isk(self.donated_isk),
            donated_30=self.donated_30,
            donated_isk_30=round_isk(self.donated_isk_30),
            last_donated=self.last_donated,
            last_received=self.last_received,
            good_standing=self.good_standing,
        )
