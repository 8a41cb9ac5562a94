"""Ports for persisting ledger data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from esi_isk.domain.model import Contract, Donation, LedgerRow

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime


@runtime_checkable
class LedgerRowRepository(Protocol):
    """Keyed access to the per-character totals table.

    ``insert`` and ``update`` raise ``LedgerPersistenceError`` when the row could
    not be written; earlier successful writes must stay intact.
    """

    def get(self, character_id: int) -> LedgerRow | None: ...

    def insert(self, row: LedgerRow) -> None: ...

    def update(self, row: LedgerRow) -> None: ...


@runtime_checkable
class TransferRepository[TTransfer](Protocol):
    """Minimal contract for a history store of one transfer kind."""

    def add(self, entity: TTransfer) -> None: ...

    def flush(self) -> None:
        """Write pending additions, raising ``TransferHistoryError`` if any is rejected."""
        ...

    def exists(self, key: int) -> bool: ...

    def received_by(self, character_id: int) -> Sequence[TTransfer]: ...

    def sent_by(self, character_id: int) -> Sequence[TTransfer]: ...

    def between(self, start: datetime | None, end: datetime) -> Sequence[TTransfer]:
        """Return transfers with ``start <= timestamp < end`` ordered by timestamp."""
        ...


@runtime_checkable
class DonationRepository(TransferRepository[Donation], Protocol):
    """History store for donations, keyed by journal ref id."""


@runtime_checkable
class ContractRepository(TransferRepository[Contract], Protocol):
    """History store for contracts, keyed by contract id."""


@runtime_checkable
class LedgerStateRepository(Protocol):
    """Small key/value state kept alongside the ledger."""

    def window_start(self) -> datetime | None: ...

    def set_window_start(self, value: datetime) -> None: ...
