from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
from decimal import Decimal

import pytest

from esi_isk.domain.errors import MissingAffiliationError
from esi_isk.domain.ledger import (
    LedgerBatch,
    add_contract,
    add_donation,
    apply_transfers,
    remove_contract,
    remove_donation,
)
from esi_isk.domain.model import LedgerRow
from tests.helpers.ledger import BASE_TIME, make_contract, make_donation

WINDOW_FIELDS = ("donated_30", "donated_isk_30", "received_30", "received_isk_30")


def _batch(*rows: LedgerRow) -> LedgerBatch:
    batch = LedgerBatch()
    for row in rows:
        batch.add(row, is_new=False)
    return batch


def _snapshot(row: LedgerRow) -> LedgerRow:
    return replace(row)


def test_add_donation_updates_both_sides() -> None:
    donator = LedgerRow(character_id=100)
    recipient = LedgerRow(character_id=200)
    batch = _batch(donator, recipient)

    assert add_donation(make_donation(amount="500.0"), batch) is True

    assert (donator.donated, donator.donated_isk) == (1, Decimal("500.0"))
    assert (donator.donated_30, donator.donated_isk_30) == (1, Decimal("500.0"))
    assert donator.last_donated == BASE_TIME
    assert donator.received == 0
    assert donator.last_received is None
    assert (recipient.received, recipient.received_isk) == (1, Decimal("500.0"))
    assert (recipient.received_30, recipient.received_isk_30) == (1, Decimal("500.0"))
    assert recipient.last_received == BASE_TIME
    assert recipient.donated == 0


@pytest.mark.parametrize("field_name", WINDOW_FIELDS)
def test_add_then_remove_restores_window_totals(field_name: str) -> None:
    donator = LedgerRow(
        character_id=100,
        donated=4,
        donated_isk=Decimal("40.5"),
        donated_30=2,
        donated_isk_30=Decimal("20.25"),
    )
    recipient = LedgerRow(character_id=200, received_30=7, received_isk_30=Decimal("0.07"))
    before = {100: _snapshot(donator), 200: _snapshot(recipient)}
    batch = _batch(donator, recipient)
    donation = make_donation(amount="123.456")

    add_donation(donation, batch)
    remove_donation(donation, batch)

    for row in (donator, recipient):
        assert getattr(row, field_name) == getattr(before[row.character_id], field_name)
    assert donator.donated == 5
    assert donator.donated_isk == Decimal("163.956")
    assert recipient.received == 1


def test_remove_leaves_lifetime_totals_and_timestamps() -> None:
    donator = LedgerRow(
        character_id=100,
        donated=1,
        donated_isk=Decimal("500.0"),
        donated_30=1,
        donated_isk_30=Decimal("500.0"),
        last_donated=BASE_TIME,
    )
    recipient = LedgerRow(character_id=200, received=1, received_30=1, received_isk_30=Decimal(500))
    batch = _batch(donator, recipient)

    remove_donation(make_donation(amount="500.0"), batch)

    assert donator.donated == 1
    assert donator.donated_isk == Decimal("500.0")
    assert donator.donated_30 == 0
    assert donator.donated_isk_30 == Decimal(0)
    assert donator.last_donated == BASE_TIME
    assert recipient.received == 1
    assert recipient.received_30 == 0


@pytest.mark.parametrize("reverse", [False, True])
def test_last_timestamps_only_move_forward(reverse: bool) -> None:
    donator = LedgerRow(character_id=100)
    recipient = LedgerRow(character_id=200)
    batch = _batch(donator, recipient)
    earlier = make_donation(1, timestamp=BASE_TIME)
    later = make_donation(2, timestamp=BASE_TIME + timedelta(hours=1))
    events = [later, earlier] if reverse else [earlier, later]

    apply_transfers(events, batch)

    assert donator.last_donated == later.timestamp
    assert recipient.last_received == later.timestamp


@pytest.mark.parametrize("addition", [True, False])
def test_unaccepted_contract_is_a_no_op(addition: bool) -> None:
    donator = LedgerRow(character_id=100, donated_30=1, donated_isk_30=Decimal(5))
    recipient = LedgerRow(character_id=200)
    before = (_snapshot(donator), _snapshot(recipient))
    batch = _batch(donator, recipient)
    contract = make_contract(accepted=False)

    applied = add_contract(contract, batch) if addition else remove_contract(contract, batch)

    assert applied is False
    assert (donator, recipient) == before


def test_unaccepted_contract_ignores_missing_rows() -> None:
    assert add_contract(make_contract(accepted=False), LedgerBatch()) is False


def test_accepted_contract_counts_like_a_donation() -> None:
    donator = LedgerRow(character_id=100)
    recipient = LedgerRow(character_id=200)
    batch = _batch(donator, recipient)

    add_contract(make_contract(amount="250.0"), batch)

    assert donator.donated_isk == Decimal("250.0")
    assert recipient.received_isk_30 == Decimal("250.0")
    assert recipient.last_received == BASE_TIME


def test_self_transfer_counts_only_as_donated() -> None:
    row = LedgerRow(character_id=100)
    batch = _batch(row)

    add_donation(make_donation(donator=100, recipient=100, amount="10"), batch)

    assert (row.donated, row.received) == (1, 0)
    assert row.donated_isk == Decimal(10)
    assert row.received_isk == Decimal(0)
    assert row.last_donated == BASE_TIME
    assert row.last_received is None


def test_removing_self_transfer_only_touches_donated_window() -> None:
    row = LedgerRow(character_id=100, donated_30=1, donated_isk_30=Decimal(10))
    batch = _batch(row)

    remove_donation(make_donation(donator=100, recipient=100, amount="10"), batch)

    assert (row.donated_30, row.received_30) == (0, 0)
    assert row.donated_isk_30 == Decimal(0)
    assert row.received_isk_30 == Decimal(0)


def test_missing_row_raises_before_any_mutation() -> None:
    donator = LedgerRow(character_id=100)
    batch = _batch(donator)

    with pytest.raises(MissingAffiliationError) as excinfo:
        add_donation(make_donation(recipient=999), batch)

    assert excinfo.value.character_id == 999
    assert donator.donated == 0


def test_apply_transfers_reports_counted_events() -> None:
    batch = _batch(LedgerRow(character_id=100), LedgerRow(character_id=200))

    counted = apply_transfers(
        [make_donation(1), make_contract(2, accepted=False), make_contract(3)],
        batch,
    )

    assert counted == 2
