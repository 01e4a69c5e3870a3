"""Metadata entries carried by entity definitions and snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

COLUMN_SCHEMA_LABEL: Final[str] = "dagster/column_schema"
COLUMN_LINEAGE_LABEL: Final[str] = "dagster/column_lineage"


@dataclass(frozen=True, slots=True)
class TableColumn:
    name: str
    type: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class TableSchema:
    columns: tuple[TableColumn, ...] = ()


@dataclass(frozen=True, slots=True)
class TableSchemaMetadataEntry:
    label: str
    schema: TableSchema


@dataclass(frozen=True, slots=True)
class JsonMetadataEntry:
    label: str
    json_string: str | None = None


@dataclass(frozen=True, slots=True)
class MetadataEntry:
    """Any entry kind this package does not interpret."""

    label: str
    typename: str


type AnyMetadataEntry = TableSchemaMetadataEntry | JsonMetadataEntry | MetadataEntry


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Most recent materialization of an entity."""

    timestamp: str | None = None
    metadata_entries: tuple[AnyMetadataEntry, ...] = field(default_factory=tuple)
