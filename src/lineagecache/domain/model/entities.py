"""Raw and resolved entity representations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .keys import EntityKey, GraphId
from .metadata import AnyMetadataEntry, Snapshot, TableColumn


@dataclass(frozen=True, slots=True)
class RawEntity:
    """Remote record for one entity before decoding."""

    key: EntityKey
    metadata_entries: tuple[AnyMetadataEntry, ...] = field(default_factory=tuple)
    snapshot: Snapshot | None = None


@dataclass(frozen=True, slots=True)
class UpstreamColumn:
    entity_key: EntityKey
    column_name: str


@dataclass(frozen=True, slots=True)
class ResolvedColumn:
    name: str
    type: str | None = None
    description: str | None = None
    as_of: str | None = None
    upstream: tuple[UpstreamColumn, ...] = ()


type ColumnSchema = Mapping[str, TableColumn]
# An empty mapping means "checked, no lineage"; absence from the cache means unresolved.
type ResolvedEntity = Mapping[str, ResolvedColumn]
type LineageCache = Mapping[GraphId, ResolvedEntity]
