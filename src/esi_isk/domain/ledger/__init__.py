"""Ledger aggregation engine.

Events flow through three steps that all share one :class:`LedgerBatch`:
the binder materialises a row for every participant, the accumulator applies
each event in memory, and the commit step writes the rows with best-effort,
per-row failure tracking.
"""

from __future__ import annotations

from .accumulator import (
    add_contract,
    add_donation,
    apply_transfers,
    remove_contract,
    remove_donation,
)
from .batch import LedgerBatch
from .binder import bind_affiliation, bind_participants, load_participants, participant_ids
from .commit import CommitResult, commit_rows
from .eviction import EvictionResult, evict_expired
from .service import (
    RecordTransfersResult,
    aggregate_transfers,
    record_transfers,
    save_character_contracts,
    save_character_donations,
    set_good_standing,
)

__all__ = [
    "CommitResult",
    "EvictionResult",
    "LedgerBatch",
    "RecordTransfersResult",
    "add_contract",
    "add_donation",
    "aggregate_transfers",
    "apply_transfers",
    "bind_affiliation",
    "bind_participants",
    "commit_rows",
    "evict_expired",
    "load_participants",
    "participant_ids",
    "record_transfers",
    "remove_contract",
    "remove_donation",
    "save_character_contracts",
    "save_character_donations",
    "set_good_standing",
]
