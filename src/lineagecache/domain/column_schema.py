"""Consolidate definition-time and materialization-time column schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .model import COLUMN_SCHEMA_LABEL, TableSchemaMetadataEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .model import AnyMetadataEntry, ColumnSchema, Snapshot, TableSchema


class ColumnSchemaBuilder(Protocol):
    def __call__(
        self,
        snapshot: Snapshot | None,
        definition_entries: Iterable[AnyMetadataEntry],
    ) -> ColumnSchema: ...


def find_table_schema(entries: Iterable[AnyMetadataEntry]) -> TableSchema | None:
    for entry in entries:
        if isinstance(entry, TableSchemaMetadataEntry) and entry.label == COLUMN_SCHEMA_LABEL:
            return entry.schema
    return None


def build_column_schema(
    snapshot: Snapshot | None,
    definition_entries: Iterable[AnyMetadataEntry],
) -> ColumnSchema:
    """Return columns by name, preferring the snapshot's schema over the definition's."""

    table_schema = None
    if snapshot is not None:
        table_schema = find_table_schema(snapshot.metadata_entries)
    if table_schema is None:
        table_schema = find_table_schema(definition_entries)
    if table_schema is None:
        return {}
    return {column.name: column for column in table_schema.columns}
