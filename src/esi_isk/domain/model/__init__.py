"""Domain model for the ISK ledger."""

from __future__ import annotations

from .events import (
    Affiliation,
    Affiliations,
    Contract,
    Donation,
    Transfer,
    as_isk,
    as_utc,
    index_affiliations,
)
from .ledger import STORAGE_COLUMNS, LedgerRow, round_isk
from .views import (
    CharacterDetails,
    CharacterView,
    contract_payload,
    donation_payload,
    format_timestamp,
)

__all__ = [
    "STORAGE_COLUMNS",
    "Affiliation",
    "Affiliations",
    "CharacterDetails",
    "CharacterView",
    "Contract",
    "Donation",
    "LedgerRow",
    "Transfer",
    "as_isk",
    "as_utc",
    "contract_payload",
    "donation_payload",
    "format_timestamp",
    "index_affiliations",
    "round_isk",
]
