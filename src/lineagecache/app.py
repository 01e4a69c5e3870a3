"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from lineagecache.adapters.dagster import build_dagster_fetcher
from lineagecache.config.lineage import get_fetch_policy
from lineagecache.domain.coordinator import FetchCoordinator
from lineagecache.domain.resolver import ColumnLineageResolver

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lineagecache.config.lineage import FetchPolicy
    from lineagecache.domain.model import EntityKey, LineageCache
    from lineagecache.domain.ports.fetching import AssetNodeFetcher


log = getLogger(__name__)


def resolve_column_lineage(
    keys: Iterable[EntityKey],
    *,
    fetcher: AssetNodeFetcher | None = None,
    policy: FetchPolicy | None = None,
) -> LineageCache:
    """Resolve column lineage for ``keys`` using the configured adapters."""

    requested = tuple(keys)
    effective_policy = policy or get_fetch_policy()
    log.info(
        "Resolving column lineage: keys=%s, max_failed_cycles=%s",
        len(requested),
        effective_policy.max_failed_cycles,
    )

    if fetcher is None:
        cache = asyncio.run(_settle_with_dagster(requested, effective_policy))
    else:
        cache = asyncio.run(_settle(requested, fetcher, effective_policy))

    unresolved = [key for key in requested if key.to_graph_id() not in cache]
    log.info(
        f"Finished column lineage resolution: resolved={len(requested) - len(unresolved)}, "
        f"unresolved={len(unresolved)}"
    )
    return cache


async def _settle(
    keys: tuple[EntityKey, ...],
    fetcher: AssetNodeFetcher,
    policy: FetchPolicy,
) -> LineageCache:
    resolver = ColumnLineageResolver(FetchCoordinator(fetcher, policy=policy))
    try:
        return await resolver.settle(keys)
    finally:
        resolver.close()


async def _settle_with_dagster(keys: tuple[EntityKey, ...], policy: FetchPolicy) -> LineageCache:
    fetcher = build_dagster_fetcher()
    try:
        return await _settle(keys, fetcher, policy)
    finally:
        await fetcher.aclose()
