"""ESI API client for character affiliations and id names."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from esi_isk.adapters.http_resilience import ResilientClient

from .schema import AffiliationList, AffiliationPayload, NameList, NamePayload

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from pydantic import TypeAdapter

    from esi_isk.config.esi import EsiConfig
    from esi_isk.config.http_resilience import ResilienceConfig
    from esi_isk.domain.model import Affiliation

log = getLogger(__name__)

MAX_IDS_PER_REQUEST: Final[int] = 1000
AFFILIATION_PATH: Final[str] = "/latest/characters/affiliation/"
NAMES_PATH: Final[str] = "/latest/universe/names/"


class EsiAPIError(RuntimeError):
    """Raised when ESI returns an unexpected response."""


def chunked(ids: Iterable[int], size: int = MAX_IDS_PER_REQUEST) -> list[list[int]]:
    """Deduplicate ids, keeping first-seen order, and split them into request-sized chunks."""

    if size <= 0:
        raise ValueError("chunk size must be positive")
    unique = list(dict.fromkeys(ids))
    return [unique[start : start + size] for start in range(0, len(unique), size)]


class EsiClient:
    """Low-level HTTP client for the ESI id lookup endpoints."""

    def __init__(
        self,
        *,
        config: EsiConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def fetch_affiliations(self, character_ids: Iterable[int]) -> list[AffiliationPayload]:
        return asyncio.run(self._post_chunked(AFFILIATION_PATH, character_ids, AffiliationList))

    def fetch_names(self, ids: Iterable[int]) -> list[NamePayload]:
        return asyncio.run(self._post_chunked(NAMES_PATH, ids, NameList))

    async def _post_chunked[TPayload](
        self,
        path: str,
        ids: Iterable[int],
        adapter: TypeAdapter[list[TPayload]],
    ) -> list[TPayload]:
        chunks = chunked(ids)
        if not chunks:
            return []

        results: list[TPayload] = []
        async with self._client_factory(self._resilience) as client:
            for chunk in chunks:
                results.extend(
                    await self._perform_request(client=client, path=path, ids=chunk, adapter=adapter)
                )
        return results

    async def _perform_request[TPayload](
        self,
        *,
        client: ResilientClient,
        path: str,
        ids: Sequence[int],
        adapter: TypeAdapter[list[TPayload]],
    ) -> list[TPayload]:
        if self._resilience.base_url is None:
            raise EsiAPIError("Missing ESI base_url in resilience configuration")

        log.debug("POST %s with %d id(s)", path, len(ids))
        response = await client.post(
            path,
            params={"datasource": self._config.datasource},
            json=list(ids),
        )
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, list):
            raise EsiAPIError(f"Unexpected ESI response payload from {path}")
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise EsiAPIError(f"Malformed ESI response payload from {path}") from exc


class EsiAffiliationProvider:
    """Resolve character affiliations through ESI."""

    def __init__(self, client: EsiClient) -> None:
        self._client = client

    def __call__(self, character_ids: Iterable[int]) -> Sequence[Affiliation]:
        payloads = self._client.fetch_affiliations(character_ids)
        return [payload.to_domain() for payload in payloads]


class EsiNameResolver:
    """Resolve character, corporation and alliance names through ESI."""

    def __init__(self, client: EsiClient) -> None:
        self._client = client

    def __call__(self, ids: Iterable[int]) -> Mapping[int, str]:
        return {payload.id: payload.name for payload in self._client.fetch_names(ids)}
