"""ESI response schemas for the id lookup endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, TypeAdapter

from esi_isk.domain.model import Affiliation

type NameCategory = Literal[
    "alliance",
    "character",
    "constellation",
    "corporation",
    "inventory_type",
    "region",
    "solar_system",
    "station",
    "faction",
]


class EsiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AffiliationPayload(EsiModel):
    character_id: int
    corporation_id: int
    alliance_id: int | None = None
    faction_id: int | None = None

    def to_domain(self) -> Affiliation:
        return Affiliation(
            character_id=self.character_id,
            corporation_id=self.corporation_id,
            alliance_id=self.alliance_id,
        )


class NamePayload(EsiModel):
    id: int
    name: str
    category: NameCategory | str


AffiliationList = TypeAdapter(list[AffiliationPayload])
NameList = TypeAdapter(list[NamePayload])
