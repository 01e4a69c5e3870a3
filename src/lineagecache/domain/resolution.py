"""Pure operations over the resolved-entity cache."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .model import EntityKey, GraphId, LineageCache, ResolvedEntity

EMPTY_CACHE: LineageCache = MappingProxyType({})


def missing_keys(requested: Iterable[EntityKey], cache: LineageCache) -> tuple[EntityKey, ...]:
    """Return requested keys absent from ``cache`` in first-seen order, without duplicates."""

    seen: set[GraphId] = set()
    missing: list[EntityKey] = []
    for key in requested:
        graph_id = key.to_graph_id()
        if graph_id in seen or graph_id in cache:
            continue
        seen.add(graph_id)
        missing.append(key)
    return tuple(missing)


def merge_resolved(
    cache: LineageCache,
    new_entries: Mapping[GraphId, ResolvedEntity],
) -> LineageCache:
    """Return a new read-only cache with ``new_entries`` inserted or overwritten."""

    merged = dict(cache)
    for graph_id, entity in new_entries.items():
        merged[graph_id] = MappingProxyType(dict(entity))
    return MappingProxyType(merged)
