from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from lineagecache.domain.coordinator import FetchCoordinator
from lineagecache.domain.errors import LineageFetchError
from lineagecache.domain.resolver import ColumnLineageResolver
from tests.helpers.entities import CUSTOMERS, EVENTS, ORDERS, UNKNOWN
from tests.helpers.fetchers import (
    FailingAssetNodeFetcher,
    FakeAssetNodeFetcher,
    GatedAssetNodeFetcher,
)

if TYPE_CHECKING:
    from lineagecache.domain.model import RawEntity


def test_resolve_returns_current_cache_and_starts_fetch(raw_entities: list[RawEntity]) -> None:
    fetcher = FakeAssetNodeFetcher(raw_entities)

    async def scenario() -> None:
        coordinator = FetchCoordinator(fetcher)
        resolver = ColumnLineageResolver(coordinator)

        first = resolver.resolve([ORDERS, EVENTS])
        assert first == {}
        assert coordinator.in_flight

        pending = coordinator.pending
        assert pending is not None
        await pending

        second = resolver.resolve([ORDERS, EVENTS])
        assert set(second) == {ORDERS.to_graph_id(), EVENTS.to_graph_id()}
        assert not coordinator.in_flight

    asyncio.run(scenario())

    assert fetcher.calls == [(ORDERS, EVENTS)]


def test_early_reevaluations_share_one_remote_call(raw_entities: list[RawEntity]) -> None:
    fetcher = GatedAssetNodeFetcher(raw_entities)

    async def scenario() -> None:
        coordinator = FetchCoordinator(fetcher)
        resolver = ColumnLineageResolver(coordinator)

        resolver.resolve([ORDERS])
        resolver.resolve([ORDERS, CUSTOMERS])
        await asyncio.sleep(0)
        resolver.resolve([ORDERS, CUSTOMERS])
        assert fetcher.calls == [(ORDERS,)]

        fetcher.release()
        cache = await resolver.settle([ORDERS, CUSTOMERS])
        assert set(cache) == {ORDERS.to_graph_id(), CUSTOMERS.to_graph_id()}

    asyncio.run(scenario())

    # The cache change after the first cycle re-evaluates and fetches only what is left.
    assert fetcher.calls == [(ORDERS,), (CUSTOMERS,)]


def test_keys_requested_during_an_empty_cycle_are_fetched_afterwards(
    raw_entities: list[RawEntity],
) -> None:
    fetcher = GatedAssetNodeFetcher(raw_entities)

    async def scenario() -> None:
        coordinator = FetchCoordinator(fetcher)
        resolver = ColumnLineageResolver(coordinator)

        resolver.resolve([UNKNOWN])
        await asyncio.sleep(0)
        fetcher.release()

        cache = await resolver.settle([UNKNOWN, CUSTOMERS])
        assert CUSTOMERS.to_graph_id() in cache
        assert UNKNOWN.to_graph_id() not in cache

    asyncio.run(scenario())

    assert fetcher.calls == [(UNKNOWN,), (UNKNOWN, CUSTOMERS), (UNKNOWN,)]


def test_keys_covered_by_the_cycle_in_flight_are_not_refetched(
    raw_entities: list[RawEntity],
) -> None:
    fetcher = GatedAssetNodeFetcher(raw_entities)

    async def scenario() -> None:
        resolver = ColumnLineageResolver(FetchCoordinator(fetcher))

        resolver.resolve([UNKNOWN, EVENTS])
        resolver.resolve([EVENTS])
        fetcher.release()
        cache = await resolver.settle([EVENTS])
        assert EVENTS.to_graph_id() in cache

    asyncio.run(scenario())

    assert fetcher.calls == [(UNKNOWN, EVENTS)]


def test_settle_resolves_everything_known(raw_entities: list[RawEntity]) -> None:
    fetcher = FakeAssetNodeFetcher(raw_entities)

    async def scenario() -> None:
        resolver = ColumnLineageResolver(FetchCoordinator(fetcher))
        cache = await resolver.settle([ORDERS, CUSTOMERS, EVENTS, UNKNOWN])

        assert set(cache) == {
            ORDERS.to_graph_id(),
            CUSTOMERS.to_graph_id(),
            EVENTS.to_graph_id(),
        }
        assert cache[EVENTS.to_graph_id()] == {}

        again = await resolver.settle([ORDERS, CUSTOMERS, EVENTS])
        assert again is cache

    asyncio.run(scenario())

    # UNKNOWN is retried once by the re-evaluation; an empty answer changes nothing, so it stops.
    assert fetcher.calls == [(ORDERS, CUSTOMERS, EVENTS, UNKNOWN), (UNKNOWN,)]


def test_resolved_keys_are_never_refetched(raw_entities: list[RawEntity]) -> None:
    fetcher = FakeAssetNodeFetcher(raw_entities)

    async def scenario() -> None:
        resolver = ColumnLineageResolver(FetchCoordinator(fetcher))
        await resolver.settle([ORDERS])
        await resolver.settle([ORDERS, EVENTS])
        await resolver.settle([EVENTS, ORDERS, CUSTOMERS])

    asyncio.run(scenario())

    assert fetcher.calls == [(ORDERS,), (EVENTS,), (CUSTOMERS,)]


def test_settle_surfaces_failures_and_later_retries(raw_entities: list[RawEntity]) -> None:
    fetcher = FailingAssetNodeFetcher(raw_entities, error=httpx.ConnectError("down"))

    async def scenario() -> None:
        coordinator = FetchCoordinator(fetcher)
        resolver = ColumnLineageResolver(coordinator)

        with pytest.raises(LineageFetchError):
            await resolver.settle([ORDERS])
        assert coordinator.cache == {}
        assert not coordinator.in_flight

        cache = await resolver.settle([ORDERS])
        assert ORDERS.to_graph_id() in cache

    asyncio.run(scenario())

    assert fetcher.calls == [(ORDERS,), (ORDERS,)]


def test_closed_resolver_stops_reacting_to_cache_changes(raw_entities: list[RawEntity]) -> None:
    fetcher = FakeAssetNodeFetcher(raw_entities)

    async def scenario() -> None:
        coordinator = FetchCoordinator(fetcher)
        resolver = ColumnLineageResolver(coordinator)
        resolver.resolve([CUSTOMERS])
        resolver.resolve([CUSTOMERS, ORDERS])
        assert resolver.requested == (CUSTOMERS, ORDERS)
        resolver.close()

        pending = coordinator.pending
        assert pending is not None
        await pending
        assert coordinator.pending is None

    asyncio.run(scenario())

    assert fetcher.calls == [(CUSTOMERS,)]
