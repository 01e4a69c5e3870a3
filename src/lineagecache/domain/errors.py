"""Errors raised while resolving column lineage."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .model import EntityKey


class LineageCacheError(Exception):
    """Base class for lineage cache failures."""


class MalformedLineagePayloadError(LineageCacheError, ValueError):
    """Raised when a serialized column lineage payload cannot be parsed."""

    def __init__(self, message: str, *, entity_key: EntityKey | None = None) -> None:
        super().__init__(message)
        self.entity_key = entity_key


class LineageFetchError(LineageCacheError):
    """Raised when a fetch cycle fails; the cache is left untouched."""

    def __init__(self, message: str, *, keys: Sequence[EntityKey]) -> None:
        super().__init__(message)
        self.keys = tuple(keys)
