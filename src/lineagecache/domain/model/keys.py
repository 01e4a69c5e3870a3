"""Entity keys and the identifiers derived from them."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

type GraphId = str


class InvalidEntityKeyError(ValueError):
    """Raised when an entity key cannot be built from the given input."""


@dataclass(frozen=True, slots=True)
class EntityKey:
    """Ordered path segments identifying a lineage-tracked entity."""

    path: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.path:
            raise InvalidEntityKeyError("Entity key path must not be empty")

    @classmethod
    def from_path(cls, segments: Iterable[str]) -> EntityKey:
        return cls(path=tuple(segments))

    @classmethod
    def from_user_string(cls, value: str) -> EntityKey:
        """Parse ``a/b/c`` into a key; blank segments are rejected."""

        segments = value.strip().split("/")
        if any(not segment for segment in segments):
            raise InvalidEntityKeyError(f"Invalid entity key: {value!r}")
        return cls(path=tuple(segments))

    def to_graph_id(self) -> GraphId:
        # Same shape as a JSON-encoded path list, so ids stay comparable across runs.
        return json.dumps(list(self.path), separators=(",", ":"))

    def to_user_string(self) -> str:
        return "/".join(self.path)

    def __str__(self) -> str:
        return self.to_user_string()
