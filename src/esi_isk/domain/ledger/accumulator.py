"""Apply transfer events to the in-memory rows of a batch."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from esi_isk.domain.model import Contract, Donation, LedgerRow, Transfer

    from .batch import LedgerBatch


def add_donation(donation: Donation, batch: LedgerBatch) -> bool:
    return _add_to_totals(donation, batch)


def remove_donation(donation: Donation, batch: LedgerBatch) -> bool:
    return _remove_from_totals(donation, batch)


def add_contract(contract: Contract, batch: LedgerBatch) -> bool:
    return _add_to_totals(contract, batch)


def remove_contract(contract: Contract, batch: LedgerBatch) -> bool:
    return _remove_from_totals(contract, batch)


def apply_transfers(
    events: Iterable[Transfer],
    batch: LedgerBatch,
    *,
    addition: bool = True,
) -> int:
    """Apply ``events`` in order and return how many of them counted."""

    apply = _add_to_totals if addition else _remove_from_totals
    return sum(1 for event in events if apply(event, batch))


def _counterparties(event: Transfer, batch: LedgerBatch) -> tuple[LedgerRow, LedgerRow | None]:
    donator = batch.row(event.donator)
    if event.recipient_id == event.donator:
        # a self-transfer only ever shows up on the donated side
        return donator, None
    return donator, batch.row(event.recipient_id)


def _add_to_totals(event: Transfer, batch: LedgerBatch) -> bool:
    if not event.counts:
        return False

    donator, recipient = _counterparties(event, batch)

    donator.donated += 1
    donator.donated_isk += event.amount
    donator.donated_30 += 1
    donator.donated_isk_30 += event.amount
    if donator.last_donated is None or donator.last_donated < event.timestamp:
        donator.last_donated = event.timestamp

    if recipient is not None:
        recipient.received += 1
        recipient.received_isk += event.amount
        recipient.received_30 += 1
        recipient.received_isk_30 += event.amount
        if recipient.last_received is None or recipient.last_received < event.timestamp:
            recipient.last_received = event.timestamp

    return True


def _remove_from_totals(event: Transfer, batch: LedgerBatch) -> bool:
    # only the trailing window is reversed; lifetime totals and timestamps stay
    if not event.counts:
        return False

    donator, recipient = _counterparties(event, batch)

    donator.donated_30 -= 1
    donator.donated_isk_30 -= event.amount

    if recipient is not None:
        recipient.received_30 -= 1
        recipient.received_isk_30 -= event.amount

    return True
