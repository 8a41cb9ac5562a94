"""JSON-lines transfer source."""

from __future__ import annotations

from .schema import ContractRecord, DonationRecord
from .source import JsonlTransferSource, TransferFileError

__all__ = ["ContractRecord", "DonationRecord", "JsonlTransferSource", "TransferFileError"]
