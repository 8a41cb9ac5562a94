"""Assemble the read-facing view of a single character."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from esi_isk.domain.errors import CharacterNotFoundError
from esi_isk.domain.model import CharacterDetails

if TYPE_CHECKING:
    from collections.abc import Callable

    from esi_isk.domain.ports.persistence import (
        ContractRepository,
        DonationRepository,
        LedgerRowRepository,
    )
    from esi_isk.domain.ports.resolution import NameResolver
    from esi_isk.domain.ports.unit_of_work import LedgerUnitOfWork

log = getLogger(__name__)


def assemble_details(
    character_id: int,
    *,
    rows: LedgerRowRepository,
    donations: DonationRepository,
    contracts: ContractRepository,
    names: NameResolver,
) -> CharacterDetails:
    """Join a ledger row with its names and transfer history.

    Any failing lookup propagates; there is no partial result.
    """

    row = rows.get(character_id)
    if row is None:
        raise CharacterNotFoundError(character_id)

    wanted = [
        entity_id
        for entity_id in (row.character_id, row.corporation_id, row.alliance_id)
        if entity_id > 0
    ]
    resolved = names(wanted)

    known: dict[int, str] = {}
    for entity_id, name in resolved.items():
        if entity_id in wanted:
            known[entity_id] = name
        else:
            log.warning("Pulled unknown ID: %s, name: %s", entity_id, name)

    return CharacterDetails(
        character=row.view(known),
        donations=tuple(donations.received_by(character_id)),
        contracts=tuple(contracts.received_by(character_id)),
        donated=tuple(donations.sent_by(character_id)),
        contracted=tuple(contracts.sent_by(character_id)),
    )


def character_details(
    character_id: int,
    *,
    unit_of_work_factory: Callable[[], LedgerUnitOfWork],
    name_resolver: NameResolver,
) -> CharacterDetails:
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        return assemble_details(
            character_id,
            rows=repositories.ledger_rows,
            donations=repositories.donations,
            contracts=repositories.contracts,
            names=name_resolver,
        )
