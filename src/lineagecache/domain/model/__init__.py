"""Domain model for column lineage resolution."""

from __future__ import annotations

from .entities import (
    ColumnSchema,
    LineageCache,
    RawEntity,
    ResolvedColumn,
    ResolvedEntity,
    UpstreamColumn,
)
from .keys import EntityKey, GraphId, InvalidEntityKeyError
from .metadata import (
    COLUMN_LINEAGE_LABEL,
    COLUMN_SCHEMA_LABEL,
    AnyMetadataEntry,
    JsonMetadataEntry,
    MetadataEntry,
    Snapshot,
    TableColumn,
    TableSchema,
    TableSchemaMetadataEntry,
)

__all__ = [
    "COLUMN_LINEAGE_LABEL",
    "COLUMN_SCHEMA_LABEL",
    "AnyMetadataEntry",
    "ColumnSchema",
    "EntityKey",
    "GraphId",
    "InvalidEntityKeyError",
    "JsonMetadataEntry",
    "LineageCache",
    "MetadataEntry",
    "RawEntity",
    "ResolvedColumn",
    "ResolvedEntity",
    "Snapshot",
    "TableColumn",
    "TableSchema",
    "TableSchemaMetadataEntry",
    "UpstreamColumn",
]
