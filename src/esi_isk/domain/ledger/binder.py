"""Resolve ledger rows for event participants and attach their affiliation."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from esi_isk.domain.errors import CharacterNotFoundError, MissingAffiliationError
from esi_isk.domain.model import LedgerRow

from .batch import LedgerBatch

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from esi_isk.domain.model import Affiliation, Transfer
    from esi_isk.domain.ports.persistence import LedgerRowRepository

log = getLogger(__name__)


def bind_affiliation(
    character_id: int,
    affiliations: Mapping[int, Affiliation],
    repository: LedgerRowRepository,
) -> tuple[LedgerRow, bool]:
    """Return the row for ``character_id`` and whether it has to be inserted.

    The supplied affiliation always wins over what is stored, so corporation and
    alliance changes are picked up by every batch that mentions the character.
    """

    affiliation = affiliations.get(character_id)
    if affiliation is None:
        raise MissingAffiliationError(character_id)

    row = repository.get(character_id)
    is_new = row is None
    if row is None:
        row = LedgerRow(character_id=character_id)

    row.corporation_id = affiliation.corporation_id
    if affiliation.alliance_id:
        row.alliance_id = affiliation.alliance_id

    return row, is_new


def participant_ids(events: Iterable[Transfer]) -> list[int]:
    """Distinct participants of the counted events, in first-seen order."""

    seen: dict[int, None] = {}
    for event in events:
        if not event.counts:
            continue
        seen.setdefault(event.donator)
        seen.setdefault(event.recipient_id)
    return list(seen)


def bind_participants(
    events: Iterable[Transfer],
    affiliations: Mapping[int, Affiliation],
    repository: LedgerRowRepository,
    *,
    batch: LedgerBatch | None = None,
) -> LedgerBatch:
    """Bind every participant of ``events`` into ``batch`` exactly once."""

    target = batch if batch is not None else LedgerBatch()
    for character_id in participant_ids(events):
        if character_id in target:
            continue
        row, is_new = bind_affiliation(character_id, affiliations, repository)
        target.add(row, is_new=is_new)
    return target


def load_participants(
    events: Iterable[Transfer],
    repository: LedgerRowRepository,
    *,
    batch: LedgerBatch | None = None,
) -> LedgerBatch:
    """Load the stored rows of every participant without touching affiliations.

    Used when reversing events that were already aggregated: their rows must exist.
    """

    target = batch if batch is not None else LedgerBatch()
    for character_id in participant_ids(events):
        if character_id in target:
            continue
        row = repository.get(character_id)
        if row is None:
            log.error("No ledger row for character %s referenced by stored events", character_id)
            raise CharacterNotFoundError(character_id)
        target.add(row, is_new=False)
    return target
