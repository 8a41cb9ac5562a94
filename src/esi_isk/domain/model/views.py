"""Read-facing projections of ledger data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decimal import Decimal

    from .events import Contract, Donation


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as RFC 3339 in UTC (``Z`` suffix)."""

    return value.astimezone(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class CharacterView:
    character_id: int
    name: str | None
    corporation_id: int
    corporation_name: str | None
    alliance_id: int
    alliance_name: str | None
    received: int
    received_isk: Decimal
    received_30: int
    received_isk_30: Decimal
    donated: int
    donated_isk: Decimal
    donated_30: int
    donated_isk_30: Decimal
    last_donated: datetime | None
    last_received: datetime | None
    good_standing: bool

    def to_payload(self) -> dict[str, object]:
        """Serialisable form; absent names, zero totals and unset timestamps are left out."""

        payload: dict[str, object] = {"id": self.character_id}
        optional: dict[str, object | None] = {
            "name": self.name,
            "corporation": self.corporation_id or None,
            "corporation_name": self.corporation_name,
            "alliance": self.alliance_id or None,
            "alliance_name": self.alliance_name,
            "received": self.received or None,
            "received_isk": float(self.received_isk) or None,
            "received_30": self.received_30 or None,
            "received_isk_30": float(self.received_isk_30) or None,
            "donated": self.donated or None,
            "donated_isk": float(self.donated_isk) or None,
            "donated_30": self.donated_30 or None,
            "donated_isk_30": float(self.donated_isk_30) or None,
            "last_donated": format_timestamp(self.last_donated) if self.last_donated else None,
            "last_received": format_timestamp(self.last_received) if self.last_received else None,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        payload["good_standing"] = self.good_standing
        return payload


def donation_payload(donation: Donation) -> dict[str, object]:
    payload: dict[str, object] = {
        "ref_id": donation.ref_id,
        "donator": donation.donator,
        "recipient": donation.recipient,
        "amount": float(donation.amount),
        "timestamp": format_timestamp(donation.timestamp),
    }
    if donation.reason:
        payload["reason"] = donation.reason
    return payload


def contract_payload(contract: Contract) -> dict[str, object]:
    payload: dict[str, object] = {
        "contract_id": contract.contract_id,
        "donator": contract.donator,
        "receiver": contract.receiver,
        "amount": float(contract.amount),
        "timestamp": format_timestamp(contract.timestamp),
        "accepted": contract.accepted,
    }
    if contract.note:
        payload["note"] = contract.note
    return payload


@dataclass(frozen=True, slots=True)
class CharacterDetails:
    """Everything shown for one character: totals plus transfer history."""

    character: CharacterView
    # ISK in
    donations: tuple[Donation, ...] = field(default_factory=tuple)
    contracts: tuple[Contract, ...] = field(default_factory=tuple)
    # ISK out
    donated: tuple[Donation, ...] = field(default_factory=tuple)
    contracted: tuple[Contract, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"character": self.character.to_payload()}
        if self.donations:
            payload["donations"] = [donation_payload(item) for item in self.donations]
        if self.contracts:
            payload["contracts"] = [contract_payload(item) for item in self.contracts]
        if self.donated:
            payload["donated"] = [donation_payload(item) for item in self.donated]
        if self.contracted:
            payload["contracted"] = [contract_payload(item) for item in self.contracted]
        return payload
