"""Transfer events and affiliations fed into the ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable


def as_isk(value: Decimal | float | int | str) -> Decimal:
    """Coerce a monetary value to ``Decimal`` without going through binary floats."""

    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@runtime_checkable
class Transfer(Protocol):
    """Shape shared by donations and contracts."""

    @property
    def donator(self) -> int: ...

    @property
    def recipient_id(self) -> int: ...

    @property
    def amount(self) -> Decimal: ...

    @property
    def timestamp(self) -> datetime: ...

    @property
    def counts(self) -> bool:
        """Whether the event contributes to ledger totals at all."""
        ...


@dataclass(eq=False, kw_only=True)
class Donation:
    """A player donation taken from a wallet journal."""

    ref_id: int
    donator: int
    recipient: int
    amount: Decimal
    timestamp: datetime
    reason: str | None = None

    def __post_init__(self) -> None:
        self.amount = as_isk(self.amount)
        if self.amount < 0:
            raise ValueError(f"Donation {self.ref_id} has a negative amount")
        self.timestamp = as_utc(self.timestamp)

    @property
    def recipient_id(self) -> int:
        return self.recipient

    @property
    def participants(self) -> tuple[int, int]:
        return (self.donator, self.recipient)

    @property
    def counts(self) -> bool:
        return True


@dataclass(eq=False, kw_only=True)
class Contract:
    """An item exchange contract used as a donation vehicle."""

    contract_id: int
    donator: int
    receiver: int
    amount: Decimal
    timestamp: datetime
    accepted: bool = False
    note: str | None = None

    def __post_init__(self) -> None:
        self.amount = as_isk(self.amount)
        if self.amount < 0:
            raise ValueError(f"Contract {self.contract_id} has a negative amount")
        self.timestamp = as_utc(self.timestamp)

    @property
    def recipient_id(self) -> int:
        return self.receiver

    @property
    def participants(self) -> tuple[int, int]:
        return (self.donator, self.receiver)

    @property
    def counts(self) -> bool:
        # unaccepted contracts never moved any ISK
        return self.accepted


@dataclass(frozen=True, slots=True)
class Affiliation:
    """Current corporation (and optional alliance) of a character."""

    character_id: int
    corporation_id: int
    alliance_id: int | None = None


type Affiliations = dict[int, Affiliation]


def index_affiliations(affiliations: Iterable[Affiliation]) -> Affiliations:
    return {affiliation.character_id: affiliation for affiliation in affiliations}
