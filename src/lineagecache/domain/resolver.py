"""Entry point composing the cache, the decoder and the fetch coordinator."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .resolution import missing_keys

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable, Iterable

    from .coordinator import FetchCoordinator
    from .model import EntityKey, LineageCache

log = getLogger(__name__)


class ColumnLineageResolver:
    """Keep a requested key set resolved against one coordinator.

    Every call to ``resolve`` and every cache change recomputes the missing keys
    and starts a fetch when none is in flight.
    """

    def __init__(self, coordinator: FetchCoordinator) -> None:
        self._coordinator = coordinator
        self._requested: tuple[EntityKey, ...] = ()
        self._watched: asyncio.Task[LineageCache] | None = None
        self._closed = False
        self._unsubscribe: Callable[[], None] = coordinator.subscribe(self._on_cache_changed)

    @property
    def requested(self) -> tuple[EntityKey, ...]:
        return self._requested

    def resolve(self, requested_keys: Iterable[EntityKey]) -> LineageCache:
        """Return the current cache, fetching whatever is still missing.

        Keys not resolved yet are absent from the returned mapping.
        """

        self._requested = tuple(requested_keys)
        return self._evaluate()

    async def settle(self, requested_keys: Iterable[EntityKey]) -> LineageCache:
        """Resolve and wait until no fetch cycle is pending.

        Raises ``LineageFetchError`` when a cycle fails. Keys the remote source
        does not know stay absent from the result.
        """

        self.resolve(requested_keys)
        while (pending := self._coordinator.pending) is not None:
            await pending
        return self._coordinator.cache

    def close(self) -> None:
        self._closed = True
        self._unsubscribe()

    def _evaluate(self) -> LineageCache:
        cache = self._coordinator.cache
        missing = missing_keys(self._requested, cache)
        if missing:
            log.debug("%d of %d requested key(s) missing", len(missing), len(self._requested))
        if self._coordinator.maybe_fetch(missing) is None:
            self._watch_pending(missing)
        return cache

    def _watch_pending(self, missing: tuple[EntityKey, ...]) -> None:
        """Re-evaluate once the in-flight cycle ends if it does not cover ``missing``.

        A cycle that merges nothing notifies no listener, so keys requested while
        it was in flight would otherwise never be fetched.
        """

        pending = self._coordinator.pending
        if pending is None or pending is self._watched:
            return
        in_flight = set(self._coordinator.in_flight_keys)
        if all(key in in_flight for key in missing):
            return
        self._watched = pending
        pending.add_done_callback(self._on_cycle_finished)

    def _on_cycle_finished(self, task: asyncio.Task[LineageCache]) -> None:
        if self._watched is task:
            self._watched = None
        # Failed cycles are not retried automatically.
        if self._closed or task.cancelled() or task.exception() is not None:
            return
        self._evaluate()

    def _on_cache_changed(self, _cache: LineageCache) -> None:
        self._evaluate()
