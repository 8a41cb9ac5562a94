from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from esi_isk.adapters.esi import (
    MAX_IDS_PER_REQUEST,
    EsiAffiliationProvider,
    EsiAPIError,
    EsiClient,
    EsiNameResolver,
    chunked,
)
from esi_isk.adapters.http_resilience import ResilienceConfig, ResilientClient
from esi_isk.config.esi import EsiConfig
from esi_isk.domain.model import Affiliation

BASE_URL = "https://esi.example.test"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> EsiClient:
    config = EsiConfig(
        datasource="tranquility",
        resilience=ResilienceConfig(name="esi-test", base_url=BASE_URL),
    )
    return EsiClient(config=config, client_factory=_make_client_factory(handler))


def test_chunked_deduplicates_and_splits() -> None:
    ids = [*range(MAX_IDS_PER_REQUEST + 5), 3, 4]

    chunks = chunked(ids)

    assert [len(chunk) for chunk in chunks] == [MAX_IDS_PER_REQUEST, 5]
    assert chunks[1] == list(range(MAX_IDS_PER_REQUEST, MAX_IDS_PER_REQUEST + 5))


def test_chunked_rejects_empty_chunks() -> None:
    with pytest.raises(ValueError, match="positive"):
        chunked([1], size=0)


def test_affiliation_provider_posts_ids_and_maps_payload() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=[
                {"character_id": 100, "corporation_id": 10, "alliance_id": 1},
                {"character_id": 200, "corporation_id": 20, "faction_id": 500001},
            ],
        )

    provider = EsiAffiliationProvider(_client(handler))

    affiliations = provider([100, 200, 100])

    assert affiliations == [Affiliation(100, 10, 1), Affiliation(200, 20, None)]
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert request.url.path == "/latest/characters/affiliation/"
    assert request.url.params["datasource"] == "tranquility"
    assert json.loads(request.content) == [100, 200]


def test_lookups_are_split_into_chunks() -> None:
    bodies: list[list[int]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        ids = json.loads(request.content)
        bodies.append(ids)
        return httpx.Response(
            200,
            json=[
                {"id": entity_id, "name": f"n{entity_id}", "category": "character"}
                for entity_id in ids
            ],
        )

    resolver = EsiNameResolver(_client(handler))

    names = resolver(list(range(1, MAX_IDS_PER_REQUEST + 2)))

    assert [len(body) for body in bodies] == [MAX_IDS_PER_REQUEST, 1]
    assert len(names) == MAX_IDS_PER_REQUEST + 1
    assert names[1] == "n1"


def test_empty_lookup_makes_no_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request to {request.url}")

    assert EsiNameResolver(_client(handler))([]) == {}


def test_name_resolver_keeps_unknown_categories() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/latest/universe/names/"
        return httpx.Response(
            200,
            json=[
                {"id": 98000001, "name": "Corp", "category": "corporation"},
                {"id": 7, "name": "Thing", "category": "something_new"},
            ],
        )

    names = EsiNameResolver(_client(handler))([98000001, 7])

    assert names == {98000001: "Corp", 7: "Thing"}


def test_unexpected_payload_raises() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "nope"})

    with pytest.raises(EsiAPIError, match="Unexpected ESI response"):
        EsiAffiliationProvider(_client(handler))([1])


def test_malformed_items_raise() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"character_id": 1}])

    with pytest.raises(EsiAPIError, match="Malformed"):
        EsiAffiliationProvider(_client(handler))([1])


def test_http_errors_propagate() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "Ensure all IDs are valid before resolving."})

    with pytest.raises(httpx.HTTPStatusError):
        EsiNameResolver(_client(handler))([1])
