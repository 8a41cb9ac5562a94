"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, cast

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from esi_isk.adapters.sqlalchemy.mappings import (
    character_table,
    contract_table,
    donation_table,
    ledger_state_table,
)
from esi_isk.domain.errors import LedgerPersistenceError, TransferHistoryError
from esi_isk.domain.model import Contract, Donation, LedgerRow

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from sqlalchemy import Column, ColumnElement, CursorResult, Executable, Table
    from sqlalchemy.orm import Session

WINDOW_START_KEY: Final[str] = "window_start"


class SqlAlchemyLedgerRowRepository:
    """Per-character totals, written one row at a time inside a savepoint."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, character_id: int) -> LedgerRow | None:
        stmt = select(character_table).where(character_table.c.character_id == character_id)
        record = self.session.execute(stmt).mappings().one_or_none()
        if record is None:
            return None
        return LedgerRow.from_storage(record)

    def insert(self, row: LedgerRow) -> None:
        stmt = character_table.insert().values(**row.to_storage())
        self._write(row, stmt)

    def update(self, row: LedgerRow) -> None:
        values = row.to_storage()
        values.pop("character_id")
        stmt = (
            update(character_table)
            .where(character_table.c.character_id == row.character_id)
            .values(**values)
        )
        self._write(row, stmt, require_match=True)

    def _write(self, row: LedgerRow, stmt: Executable, *, require_match: bool = False) -> None:
        try:
            with self.session.begin_nested():
                result = cast("CursorResult[object]", self.session.execute(stmt))
                if require_match and result.rowcount == 0:
                    raise LedgerPersistenceError(
                        row.character_id,
                        f"character {row.character_id} does not exist",
                    )
        except SQLAlchemyError as exc:
            raise LedgerPersistenceError(row.character_id) from exc


class SqlAlchemyTransferRepository[TTransfer: (Donation, Contract)]:
    """Shared queries for the donation and contract history tables."""

    def __init__(
        self,
        session: Session,
        entity_cls: type[TTransfer],
        table: Table,
        *,
        key_column: str,
        recipient_column: str,
    ) -> None:
        self.session = session
        self._entity_cls = entity_cls
        self._table = table
        self._key: Column[int] = table.c[key_column]
        self._recipient: Column[int] = table.c[recipient_column]

    def add(self, entity: TTransfer) -> None:
        self.session.add(entity)

    def flush(self) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise TransferHistoryError(self._table.name) from exc

    def exists(self, key: int) -> bool:
        stmt = select(self._key).where(self._key == key).limit(1)
        return self.session.execute(stmt).scalar_one_or_none() is not None

    def received_by(self, character_id: int) -> Sequence[TTransfer]:
        return self._history(self._recipient == character_id)

    def sent_by(self, character_id: int) -> Sequence[TTransfer]:
        return self._history(self._table.c.donator == character_id)

    def between(self, start: datetime | None, end: datetime) -> Sequence[TTransfer]:
        timestamp = self._table.c.timestamp
        stmt = select(self._entity_cls).where(timestamp < end)
        if start is not None:
            stmt = stmt.where(timestamp >= start)
        stmt = stmt.order_by(timestamp.asc(), self._key.asc())
        return self.session.scalars(stmt).all()

    def _history(self, criterion: ColumnElement[bool]) -> Sequence[TTransfer]:
        stmt = (
            select(self._entity_cls)
            .where(criterion)
            .order_by(self._table.c.timestamp.desc(), self._key.desc())
        )
        return self.session.scalars(stmt).all()


class SqlAlchemyDonationRepository(SqlAlchemyTransferRepository[Donation]):
    def __init__(self, session: Session) -> None:
        super().__init__(
            session,
            Donation,
            donation_table,
            key_column="ref_id",
            recipient_column="recipient",
        )


class SqlAlchemyContractRepository(SqlAlchemyTransferRepository[Contract]):
    def __init__(self, session: Session) -> None:
        super().__init__(
            session,
            Contract,
            contract_table,
            key_column="contract_id",
            recipient_column="receiver",
        )


class SqlAlchemyLedgerStateRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def window_start(self) -> datetime | None:
        stmt = select(ledger_state_table.c.timestamp).where(
            ledger_state_table.c.key == WINDOW_START_KEY
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def set_window_start(self, value: datetime) -> None:
        stmt = (
            update(ledger_state_table)
            .where(ledger_state_table.c.key == WINDOW_START_KEY)
            .values(timestamp=value)
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        if result.rowcount == 0:
            self.session.execute(
                ledger_state_table.insert().values(key=WINDOW_START_KEY, timestamp=value)
            )


if TYPE_CHECKING:
    from esi_isk.domain.ports.persistence import (
        ContractRepository,
        DonationRepository,
        LedgerRowRepository,
        LedgerStateRepository,
    )

    _session_stub = cast("Session", object())
    _rows_check: LedgerRowRepository = SqlAlchemyLedgerRowRepository(_session_stub)
    _donations_check: DonationRepository = SqlAlchemyDonationRepository(_session_stub)
    _contracts_check: ContractRepository = SqlAlchemyContractRepository(_session_stub)
    _state_check: LedgerStateRepository = SqlAlchemyLedgerStateRepository(_session_stub)
