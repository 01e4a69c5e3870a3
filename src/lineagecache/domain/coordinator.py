"""Single-flight fetch coordination for the lineage cache.

One coordinator owns one cache. It issues at most one remote fetch at a time;
a fetch cycle is ``Idle -> Fetching -> Idle`` with the remote call as its only
suspension point. A cycle either merges its whole batch or nothing.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from lineagecache.config.lineage import FetchPolicy

from .column_lineage import decode_column_lineage
from .errors import LineageFetchError
from .resolution import EMPTY_CACHE, merge_resolved

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .model import EntityKey, GraphId, LineageCache, RawEntity, ResolvedEntity
    from .ports.fetching import AssetNodeFetcher

    type CacheListener = Callable[[LineageCache], None]
    type EntityDecoder = Callable[[RawEntity], ResolvedEntity]

log = getLogger(__name__)


class FetchCoordinator:
    def __init__(
        self,
        fetcher: AssetNodeFetcher,
        *,
        decoder: EntityDecoder = decode_column_lineage,
        policy: FetchPolicy | None = None,
        cache: LineageCache = EMPTY_CACHE,
    ) -> None:
        self._fetcher = fetcher
        self._decoder = decoder
        self._policy = policy or FetchPolicy()
        self._cache = cache
        self._pending: asyncio.Task[LineageCache] | None = None
        self._in_flight_keys: tuple[EntityKey, ...] = ()
        self._listeners: list[CacheListener] = []
        self._failed_cycles = 0
        self.last_error: BaseException | None = None

    @property
    def cache(self) -> LineageCache:
        return self._cache

    @property
    def in_flight(self) -> bool:
        return self._pending is not None

    @property
    def in_flight_keys(self) -> tuple[EntityKey, ...]:
        return self._in_flight_keys

    @property
    def pending(self) -> asyncio.Task[LineageCache] | None:
        return self._pending

    @property
    def failed_cycles(self) -> int:
        return self._failed_cycles

    def subscribe(self, listener: CacheListener) -> Callable[[], None]:
        """Call ``listener`` with the new cache after every merge that adds entries."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reset_failures(self) -> None:
        self._failed_cycles = 0

    def maybe_fetch(self, missing: Sequence[EntityKey]) -> asyncio.Task[LineageCache] | None:
        """Start a fetch cycle for ``missing`` unless there is nothing to do.

        Must be called from a running event loop. Returns the scheduled task, or
        ``None`` when ``missing`` is empty, a cycle is already in flight, or the
        failure policy is exhausted.
        """

        if not missing:
            return None
        if self._pending is not None:
            log.debug("Fetch already in flight; deferring %d key(s)", len(missing))
            return None
        if self._policy.exhausted(self._failed_cycles):
            log.warning(
                "Not fetching %d key(s): %d consecutive failed cycle(s)",
                len(missing),
                self._failed_cycles,
            )
            return None

        keys = tuple(missing)
        # The guard is set before the task first runs so re-evaluations queued
        # on the loop in the meantime see the fetch as in flight.
        task = asyncio.get_running_loop().create_task(self._run_cycle(keys))
        self._pending = task
        self._in_flight_keys = keys
        task.add_done_callback(self._on_cycle_done)
        return task

    async def _run_cycle(self, keys: tuple[EntityKey, ...]) -> LineageCache:
        log.info("Fetching column lineage for %d entity key(s)", len(keys))
        try:
            entities = await self._fetcher(keys)
            decoded: dict[GraphId, ResolvedEntity] = {
                entity.key.to_graph_id(): self._decoder(entity) for entity in entities
            }
        except Exception as exc:
            self._failed_cycles += 1
            self.last_error = exc
            raise LineageFetchError(
                f"Column lineage fetch failed for {len(keys)} key(s): {exc}",
                keys=keys,
            ) from exc
        finally:
            self._pending = None
            self._in_flight_keys = ()

        self._failed_cycles = 0
        self.last_error = None
        if not decoded:
            log.info("Fetch returned no entities for %d key(s)", len(keys))
            return self._cache

        self._cache = merge_resolved(self._cache, decoded)
        log.info("Merged %d resolved entit(ies) into the cache", len(decoded))
        for listener in tuple(self._listeners):
            listener(self._cache)
        return self._cache

    def _on_cycle_done(self, task: asyncio.Task[LineageCache]) -> None:
        if task.cancelled():
            # A task cancelled before its first step never reaches the finally block.
            if self._pending is task:
                self._pending = None
                self._in_flight_keys = ()
            log.warning("Fetch cycle was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            log.error("%s", exc)
