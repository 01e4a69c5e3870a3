from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from lineagecache.adapters.dagster.client import should_cache_payload
from lineagecache.adapters.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    _build_cache_components,  # type: ignore[reportPrivateUsage]
    _ShouldCacheResponseFilter,  # type: ignore[reportPrivateUsage]
)


def test_cache_components_disabled() -> None:
    assert _build_cache_components(None) == (None, None)
    assert _build_cache_components(CacheConfig(enabled=False)) == (None, None)


def test_cache_components_reject_unknown_backend() -> None:
    with pytest.raises(ValueError, match="Unsupported cache backend"):
        _build_cache_components(CacheConfig(backend="redis"))  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        (None, True),
        (json.dumps({"data": {"assetNodes": []}}).encode(), True),
        (json.dumps({"data": None, "errors": [{"message": "x"}]}).encode(), False),
        (b"\xff\xfe", False),
        (b"not json", False),
    ],
)
def test_should_cache_filter_delegates_to_predicate(body: bytes | None, *, expected: bool) -> None:
    response_filter = _ShouldCacheResponseFilter(should_cache_payload)

    assert response_filter.needs_body() is True
    assert response_filter.apply(None, body) is expected  # type: ignore[arg-type]


def test_client_posts_through_rate_limiter() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code=200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )

    async def scenario() -> list[dict[str, object]]:
        async with ResilientClient(config) as client:
            client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            responses = [
                await client.post("http://example.test/graphql", json={"n": index})
                for index in range(3)
            ]
        return [response.json() for response in responses]

    payloads = asyncio.run(scenario())

    assert payloads == [{"ok": True}] * 3
    assert [json.loads(request.content) for request in seen] == [{"n": 0}, {"n": 1}, {"n": 2}]


def test_client_applies_default_headers_and_base_url() -> None:
    config = ResilienceConfig(
        name="test",
        base_url="http://example.test",
        default_headers={"Dagster-Cloud-Api-Token": "secret"},
    )
    client = ResilientClient(config)

    try:
        inner = client._client  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        assert inner.headers["Dagster-Cloud-Api-Token"] == "secret"
        assert str(inner.base_url) == "http://example.test/"
    finally:
        asyncio.run(client.aclose())
