from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import inspect

from esi_isk.adapters.sqlalchemy import (
    SqlAlchemyContractRepository,
    SqlAlchemyDonationRepository,
    SqlAlchemyLedgerRowRepository,
    SqlAlchemyLedgerStateRepository,
)
from esi_isk.adapters.sqlalchemy.mappings import donation_table
from esi_isk.domain.errors import LedgerPersistenceError, TransferHistoryError
from esi_isk.domain.model import LedgerRow
from tests.helpers.ledger import BASE_TIME, make_contract, make_donation

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_migrations_create_ledger_schema(sqlite_engine: Engine) -> None:
    inspector = inspect(sqlite_engine)

    assert {"character", "donation", "contract", "ledger_state"} <= set(
        inspector.get_table_names()
    )
    donation_indexes = {index["name"] for index in inspector.get_indexes("donation")}
    assert donation_indexes == {
        "ix_donation_donator",
        "ix_donation_recipient",
        "ix_donation_timestamp",
    }


def test_ledger_row_round_trip_keeps_exact_values(sqlite_session: Session) -> None:
    repository = SqlAlchemyLedgerRowRepository(sqlite_session)
    row = LedgerRow(
        character_id=90000001,
        corporation_id=98000001,
        alliance_id=99000001,
        received=3,
        received_isk=Decimal("12345678901234.123456"),
        received_30=1,
        received_isk_30=Decimal("0.1"),
        last_received=BASE_TIME,
        good_standing=True,
    )

    repository.insert(row)
    loaded = repository.get(row.character_id)

    assert loaded == row
    assert loaded is not None
    assert loaded.last_received is not None
    assert loaded.last_received.tzinfo is not None


def test_get_unknown_row_returns_none(sqlite_session: Session) -> None:
    assert SqlAlchemyLedgerRowRepository(sqlite_session).get(1) is None


def test_update_overwrites_stored_totals(sqlite_session: Session) -> None:
    repository = SqlAlchemyLedgerRowRepository(sqlite_session)
    repository.insert(LedgerRow(character_id=1, corporation_id=10))

    repository.update(
        LedgerRow(character_id=1, corporation_id=11, donated=2, donated_isk=Decimal("7.5"))
    )

    loaded = repository.get(1)
    assert loaded is not None
    assert (loaded.corporation_id, loaded.donated, loaded.donated_isk) == (11, 2, Decimal("7.5"))


def test_update_of_missing_row_fails(sqlite_session: Session) -> None:
    repository = SqlAlchemyLedgerRowRepository(sqlite_session)

    with pytest.raises(LedgerPersistenceError) as excinfo:
        repository.update(LedgerRow(character_id=404))

    assert excinfo.value.character_id == 404


def test_failed_insert_keeps_earlier_writes(sqlite_session: Session) -> None:
    repository = SqlAlchemyLedgerRowRepository(sqlite_session)
    repository.insert(LedgerRow(character_id=1, donated=1))

    with pytest.raises(LedgerPersistenceError):
        repository.insert(LedgerRow(character_id=1, donated=5))
    repository.insert(LedgerRow(character_id=2))
    sqlite_session.commit()

    first = repository.get(1)
    assert first is not None
    assert first.donated == 1
    assert repository.get(2) is not None


def test_donation_history_queries(sqlite_session: Session) -> None:
    repository = SqlAlchemyDonationRepository(sqlite_session)
    older = make_donation(1, donator=100, recipient=200, timestamp=BASE_TIME)
    newer = make_donation(
        2, donator=300, recipient=200, amount="0.3", timestamp=BASE_TIME + timedelta(days=1)
    )
    outgoing = make_donation(3, donator=200, recipient=100, timestamp=BASE_TIME)
    for donation in (older, newer, outgoing):
        repository.add(donation)
    sqlite_session.commit()

    assert repository.exists(2)
    assert not repository.exists(4)
    assert [item.ref_id for item in repository.received_by(200)] == [2, 1]
    assert [item.ref_id for item in repository.sent_by(200)] == [3]
    first_day = repository.between(None, BASE_TIME + timedelta(days=1))
    later = repository.between(BASE_TIME + timedelta(hours=1), BASE_TIME + timedelta(days=365))
    assert [item.ref_id for item in first_day] == [1, 3]
    assert [item.ref_id for item in later] == [2]


def test_donation_amounts_survive_storage(sqlite_session: Session) -> None:
    repository = SqlAlchemyDonationRepository(sqlite_session)
    repository.add(make_donation(1, amount="0.1"))
    repository.add(make_donation(2, amount="0.2"))
    sqlite_session.commit()
    sqlite_session.expire_all()

    total = sum((item.amount for item in repository.received_by(200)), Decimal(0))

    assert total == Decimal("0.3")


def test_flush_reports_history_conflicts(sqlite_session: Session) -> None:
    sqlite_session.execute(
        donation_table.insert().values(
            ref_id=1, donator=100, recipient=200, amount=Decimal(5), timestamp=BASE_TIME
        )
    )
    sqlite_session.commit()
    repository = SqlAlchemyDonationRepository(sqlite_session)

    repository.add(make_donation(1))

    with pytest.raises(TransferHistoryError, match="donation history"):
        repository.flush()


def test_contract_history_queries(sqlite_session: Session) -> None:
    repository = SqlAlchemyContractRepository(sqlite_session)
    repository.add(make_contract(10, donator=100, receiver=200, note="ship"))
    repository.add(make_contract(11, donator=200, receiver=300, accepted=False))
    sqlite_session.commit()

    received = repository.received_by(200)
    assert [item.contract_id for item in received] == [10]
    assert received[0].note == "ship"
    assert received[0].accepted is True
    assert [item.contract_id for item in repository.sent_by(200)] == [11]
    assert repository.exists(11)


def test_window_start_is_stored_once(sqlite_session: Session) -> None:
    repository = SqlAlchemyLedgerStateRepository(sqlite_session)

    assert repository.window_start() is None

    repository.set_window_start(BASE_TIME)
    repository.set_window_start(BASE_TIME + timedelta(days=1))
    sqlite_session.commit()

    assert repository.window_start() == BASE_TIME + timedelta(days=1)
