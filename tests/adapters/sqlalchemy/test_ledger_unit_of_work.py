from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from esi_isk.adapters.sqlalchemy.repositories import SqlAlchemyDonationRepository
from esi_isk.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    StartupError,
    create_database_engine,
    is_started,
    shutdown,
    startup,
)
from esi_isk.domain.details import character_details
from esi_isk.domain.errors import TransferHistoryError
from esi_isk.domain.ledger import LedgerBatch, commit_rows, evict_expired, record_transfers
from esi_isk.domain.model import LedgerRow
from esi_isk.domain.ports.sources import TransferBatch
from tests.helpers.ledger import (
    BASE_TIME,
    FakeAffiliationProvider,
    FakeNameResolver,
    affiliations_for,
    fixed_clock,
    make_contract,
    make_donation,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert is_started() is False
    with pytest.raises(StartupError):
        SqlAlchemyLedgerUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_database_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_database_engine("sqlite+pysqlite:///:memory:")

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    with SqlAlchemyLedgerUnitOfWork() as uow:
        assert uow.session.get_bind() is engine_b


def test_rolled_back_work_is_discarded(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork],
) -> None:
    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.repositories.donations.add(make_donation(1))
        uow.repositories.ledger_rows.insert(LedgerRow(character_id=100))
        raise RuntimeError("abort")

    with sqlite_unit_of_work() as uow:
        assert not uow.repositories.donations.exists(1)
        assert uow.repositories.ledger_rows.get(100) is None


def test_record_transfers_persists_rows_and_history(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork],
) -> None:
    result = record_transfers(
        TransferBatch(
            donations=[make_donation(1, amount="500.0")],
            contracts=[make_contract(2, donator=200, receiver=100, amount="0.15")],
        ),
        unit_of_work_factory=sqlite_unit_of_work,
        affiliation_provider=FakeAffiliationProvider(affiliations_for(100, 200)),
    )

    assert result.commit.error is None
    with sqlite_unit_of_work() as uow:
        donator = uow.repositories.ledger_rows.get(100)
        assert donator is not None
        assert (donator.donated, donator.donated_isk) == (1, Decimal("500.0"))
        assert (donator.received, donator.received_isk) == (1, Decimal("0.15"))
        assert donator.corporation_id == 10
        assert donator.last_donated == BASE_TIME
        assert uow.repositories.donations.exists(1)
        assert uow.repositories.contracts.exists(2)


def test_partial_failure_keeps_successful_rows(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.ledger_rows.insert(LedgerRow(character_id=1, donated=1))
        uow.commit()

    batch = LedgerBatch()
    # stale "new" classification: the insert collides with the stored row
    batch.add(LedgerRow(character_id=1, donated=99), is_new=True)
    batch.add(LedgerRow(character_id=2, received=1), is_new=True)

    with sqlite_unit_of_work() as uow:
        result = commit_rows(batch, uow.repositories.ledger_rows)
        uow.commit()

    assert result.failed == [1]
    assert result.inserted == [2]
    assert str(result.error) == "failed to save character(s): 1"
    with sqlite_unit_of_work() as uow:
        survivor = uow.repositories.ledger_rows.get(2)
        untouched = uow.repositories.ledger_rows.get(1)
    assert survivor is not None
    assert survivor.received == 1
    assert untouched is not None
    assert untouched.donated == 1


def test_history_conflict_does_not_blame_ledger_rows(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    provider = FakeAffiliationProvider(affiliations_for(100, 200))
    record_transfers(
        TransferBatch(donations=[make_donation(1)]),
        unit_of_work_factory=sqlite_unit_of_work,
        affiliation_provider=provider,
    )
    # another writer stored ref 1 between the existence check and the flush
    monkeypatch.setattr(SqlAlchemyDonationRepository, "exists", lambda _self, _key: False)

    with pytest.raises(TransferHistoryError, match="donation history"):
        record_transfers(
            TransferBatch(donations=[make_donation(1), make_donation(2)]),
            unit_of_work_factory=sqlite_unit_of_work,
            affiliation_provider=provider,
        )

    monkeypatch.undo()
    with sqlite_unit_of_work() as uow:
        donator = uow.repositories.ledger_rows.get(100)
        assert donator is not None
        assert donator.donated == 1
        assert not uow.repositories.donations.exists(2)


def test_eviction_persists_watermark(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork],
) -> None:
    record_transfers(
        TransferBatch(
            donations=[
                make_donation(1, amount="100", timestamp=BASE_TIME),
                make_donation(2, amount="1", timestamp=BASE_TIME + timedelta(days=15)),
            ]
        ),
        unit_of_work_factory=sqlite_unit_of_work,
        affiliation_provider=FakeAffiliationProvider(affiliations_for(100, 200)),
    )
    now = BASE_TIME + timedelta(days=31)

    result = evict_expired(
        unit_of_work_factory=sqlite_unit_of_work,
        window=timedelta(days=30),
        clock=fixed_clock(now),
    )

    assert result.donations == 1
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.state.window_start() == now - timedelta(days=30)
        recipient = uow.repositories.ledger_rows.get(200)
        assert recipient is not None
        assert (recipient.received, recipient.received_30) == (2, 1)
        assert recipient.received_isk_30 == Decimal(1)


def test_character_details_reads_history(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLedgerUnitOfWork],
) -> None:
    record_transfers(
        TransferBatch(donations=[make_donation(1), make_donation(2, donator=200, recipient=100)]),
        unit_of_work_factory=sqlite_unit_of_work,
        affiliation_provider=FakeAffiliationProvider(affiliations_for(100, 200)),
    )

    details = character_details(
        200,
        unit_of_work_factory=sqlite_unit_of_work,
        name_resolver=FakeNameResolver({200: "Recipient", 20: "Corp"}),
    )

    payload = details.to_payload()
    assert payload["character"] == {
        "id": 200,
        "name": "Recipient",
        "corporation": 20,
        "corporation_name": "Corp",
        "received": 1,
        "received_isk": 500.0,
        "received_30": 1,
        "received_isk_30": 500.0,
        "donated": 1,
        "donated_isk": 500.0,
        "donated_30": 1,
        "donated_isk_30": 500.0,
        "last_donated": "2024-05-01T12:00:00Z",
        "last_received": "2024-05-01T12:00:00Z",
        "good_standing": False,
    }
    assert [item.ref_id for item in details.donations] == [1]
    assert [item.ref_id for item in details.donated] == [2]
