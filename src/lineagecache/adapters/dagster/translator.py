"""Translate Dagster GraphQL payloads into raw domain entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lineagecache.domain.model import (
    EntityKey,
    JsonMetadataEntry,
    MetadataEntry,
    RawEntity,
    Snapshot,
    TableColumn,
    TableSchema,
    TableSchemaMetadataEntry,
)

from .schema import JsonMetadataEntryPayload, TableSchemaMetadataEntryPayload

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lineagecache.domain.model import AnyMetadataEntry

    from .schema import AssetNodePayload, MaterializationPayload, MetadataEntryPayload


def translate_asset_node(payload: AssetNodePayload) -> RawEntity:
    # The query asks for one materialization; anything beyond the first is ignored.
    materialization = payload.asset_materializations[0] if payload.asset_materializations else None
    return RawEntity(
        key=EntityKey.from_path(payload.asset_key.path),
        metadata_entries=translate_metadata_entries(payload.metadata_entries),
        snapshot=translate_materialization(materialization) if materialization else None,
    )


def translate_materialization(payload: MaterializationPayload) -> Snapshot:
    return Snapshot(
        timestamp=payload.timestamp,
        metadata_entries=translate_metadata_entries(payload.metadata_entries),
    )


def translate_metadata_entries(
    entries: Iterable[MetadataEntryPayload],
) -> tuple[AnyMetadataEntry, ...]:
    return tuple(_translate_metadata_entry(entry) for entry in entries)


def _translate_metadata_entry(entry: MetadataEntryPayload) -> AnyMetadataEntry:
    if isinstance(entry, TableSchemaMetadataEntryPayload):
        return TableSchemaMetadataEntry(
            label=entry.label,
            schema=TableSchema(
                columns=tuple(
                    TableColumn(
                        name=column.name,
                        type=column.type,
                        description=column.description,
                    )
                    for column in entry.table_schema.columns
                )
            ),
        )
    if isinstance(entry, JsonMetadataEntryPayload):
        return JsonMetadataEntry(label=entry.label, json_string=entry.json_string)
    return MetadataEntry(label=entry.label, typename=entry.typename)
