"""Dagster-backed implementation of the asset node fetch port."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from lineagecache.config.dagster import DagsterConfig, get_dagster_config

from .client import DagsterGraphQLClient, should_cache_payload
from .translator import translate_asset_node

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lineagecache.domain.model import EntityKey, RawEntity
    from lineagecache.domain.ports.fetching import AssetNodeFetcher

log = getLogger(__name__)


def _default_config() -> DagsterConfig:
    return get_dagster_config(cache_predicate=should_cache_payload)


@dataclass(slots=True)
class DagsterAssetNodeFetcher:
    config: DagsterConfig = field(default_factory=_default_config)
    client: DagsterGraphQLClient | None = None

    async def __call__(self, keys: Sequence[EntityKey]) -> list[RawEntity]:
        if self.client is None:
            self.client = DagsterGraphQLClient(config=self.config)
        payloads = await self.client.fetch_asset_nodes(keys)
        log.debug("Dagster returned %d asset node(s) for %d key(s)", len(payloads), len(keys))
        return [translate_asset_node(payload) for payload in payloads]

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()


def build_dagster_fetcher(*, config: DagsterConfig | None = None) -> DagsterAssetNodeFetcher:
    effective_config = config or _default_config()
    return DagsterAssetNodeFetcher(
        config=effective_config,
        client=DagsterGraphQLClient(config=effective_config),
    )


if TYPE_CHECKING:
    _fetcher_check: AssetNodeFetcher = DagsterAssetNodeFetcher()
