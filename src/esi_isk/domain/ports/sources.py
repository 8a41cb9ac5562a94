"""Ports for receiving transfer events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from esi_isk.domain.model import Contract, Donation


@dataclass(slots=True)
class TransferBatch:
    """Ordered donations and contracts delivered by an event source."""

    donations: list[Donation] = field(default_factory=list)
    contracts: list[Contract] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.donations) + len(self.contracts)


@runtime_checkable
class TransferSource(Protocol):
    """Callable port producing the next batch of transfers."""

    def __call__(self) -> TransferBatch: ...


__all__ = ["TransferBatch", "TransferSource"]
