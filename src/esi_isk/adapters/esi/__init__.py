"""ESI adapter: character affiliations and name resolution."""

from __future__ import annotations

from .client import (
    MAX_IDS_PER_REQUEST,
    EsiAffiliationProvider,
    EsiAPIError,
    EsiClient,
    EsiNameResolver,
    chunked,
)
from .schema import AffiliationPayload, NamePayload

__all__ = [
    "MAX_IDS_PER_REQUEST",
    "AffiliationPayload",
    "EsiAPIError",
    "EsiAffiliationProvider",
    "EsiClient",
    "EsiNameResolver",
    "NamePayload",
    "chunked",
]
