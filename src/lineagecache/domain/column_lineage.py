"""Decode serialized column lineage into resolved entities.

Column definitions and column lineage arrive in two separate metadata entries,
and the definitions may be specified at definition time or on the latest
materialization. Both are combined here into one per-column description.

The wire format wraps each upstream key in an extra list::

    {"col": [{"upstream_asset_key": [["db", "table"]], "upstream_column_name": "id"}]}

Only the first inner list is meaningful.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .column_schema import build_column_schema
from .errors import MalformedLineagePayloadError
from .model import (
    COLUMN_LINEAGE_LABEL,
    EntityKey,
    JsonMetadataEntry,
    ResolvedColumn,
    UpstreamColumn,
)

if TYPE_CHECKING:
    from .column_schema import ColumnSchemaBuilder
    from .model import RawEntity, ResolvedEntity, Snapshot

log = getLogger(__name__)


class UpstreamColumnPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    upstream_asset_key: list[Annotated[list[str], Field(min_length=1)]] = Field(min_length=1)
    upstream_column_name: str


type ColumnLineagePayload = dict[str, list[UpstreamColumnPayload]]

_PAYLOAD_ADAPTER: TypeAdapter[ColumnLineagePayload] = TypeAdapter(ColumnLineagePayload)


def find_column_lineage_entry(snapshot: Snapshot | None) -> JsonMetadataEntry | None:
    if snapshot is None:
        return None
    for entry in snapshot.metadata_entries:
        if isinstance(entry, JsonMetadataEntry) and entry.label == COLUMN_LINEAGE_LABEL:
            return entry
    return None


def parse_column_lineage(
    json_string: str,
    *,
    entity_key: EntityKey | None = None,
) -> ColumnLineagePayload:
    try:
        return _PAYLOAD_ADAPTER.validate_json(json_string)
    except ValidationError as exc:
        target = f" for {entity_key}" if entity_key is not None else ""
        raise MalformedLineagePayloadError(
            f"Malformed column lineage payload{target}: {exc.error_count()} error(s)",
            entity_key=entity_key,
        ) from exc


def decode_column_lineage(
    entity: RawEntity,
    *,
    schema_builder: ColumnSchemaBuilder = build_column_schema,
) -> ResolvedEntity:
    """Merge an entity's lineage payload with its column schema.

    Returns an empty mapping when the entity has no snapshot or no lineage; that
    is the "known, empty" state and keeps the entity from being fetched again.
    Columns that only appear in the schema are not emitted.
    """

    snapshot = entity.snapshot
    lineage_entry = find_column_lineage_entry(snapshot)
    if lineage_entry is None or lineage_entry.json_string is None:
        return {}

    payload = parse_column_lineage(lineage_entry.json_string, entity_key=entity.key)
    schema = schema_builder(snapshot, entity.metadata_entries)
    as_of = snapshot.timestamp if snapshot is not None else None

    resolved: dict[str, ResolvedColumn] = {}
    for column_name, references in payload.items():
        column = schema.get(column_name)
        resolved[column_name] = ResolvedColumn(
            name=column_name,
            type=(column.type or None) if column is not None else None,
            description=(column.description or None) if column is not None else None,
            as_of=as_of,
            upstream=tuple(
                UpstreamColumn(
                    entity_key=EntityKey.from_path(reference.upstream_asset_key[0]),
                    column_name=reference.upstream_column_name,
                )
                for reference in references
            ),
        )

    log.debug("Decoded %d lineage column(s) for %s", len(resolved), entity.key)
    return resolved


def encode_column_lineage(entity: ResolvedEntity) -> str:
    """Serialize resolved lineage back into the wire format."""

    payload: ColumnLineagePayload = {
        column_name: [
            UpstreamColumnPayload(
                upstream_asset_key=[list(upstream.entity_key.path)],
                upstream_column_name=upstream.column_name,
            )
            for upstream in column.upstream
        ]
        for column_name, column in entity.items()
    }
    return _PAYLOAD_ADAPTER.dump_json(payload).decode()
