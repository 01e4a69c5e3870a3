"""Ports for fetching raw entity records from a remote source."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lineagecache.domain.model import EntityKey, RawEntity


@runtime_checkable
class AssetNodeFetcher(Protocol):
    """Callable port returning the raw records for exactly the requested keys.

    Keys unknown to the remote source are simply absent from the result.
    Transport failures are raised, never returned as partial results.
    """

    async def __call__(self, keys: Sequence[EntityKey]) -> Sequence[RawEntity]: ...


__all__ = ["AssetNodeFetcher"]
