"""Pydantic models for JSON-lines transfer exports."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from decimal import Decimal  # noqa: TC003
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, TypeAdapter, field_validator

from esi_isk.domain.model import Contract, Donation


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class TransferRecordBase(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    donator: NonNegativeInt
    amount: Decimal = Field(ge=0)
    timestamp: datetime


class DonationRecord(TransferRecordBase):
    type: Literal["donation"]
    ref_id: int
    recipient: NonNegativeInt
    reason: str | None = None

    _normalize_reason = field_validator("reason", mode="before")(_blank_to_none)

    def to_domain(self) -> Donation:
        return Donation(
            ref_id=self.ref_id,
            donator=self.donator,
            recipient=self.recipient,
            amount=self.amount,
            timestamp=self.timestamp,
            reason=self.reason,
        )


class ContractRecord(TransferRecordBase):
    type: Literal["contract"]
    contract_id: int
    receiver: NonNegativeInt = Field(alias="acceptor")
    accepted: bool = False
    note: str | None = None

    _normalize_note = field_validator("note", mode="before")(_blank_to_none)

    def to_domain(self) -> Contract:
        return Contract(
            contract_id=self.contract_id,
            donator=self.donator,
            receiver=self.receiver,
            amount=self.amount,
            timestamp=self.timestamp,
            accepted=self.accepted,
            note=self.note,
        )


TransferRecord = Annotated[DonationRecord | ContractRecord, Field(discriminator="type")]

TransferRecordAdapter: TypeAdapter[DonationRecord | ContractRecord] = TypeAdapter(TransferRecord)
