"""Pydantic models describing the Dagster GraphQL column lineage payloads."""

from __future__ import annotations

import logging
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class DagsterBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Dagster %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class AssetKeyPayload(DagsterBaseModel):
    path: list[str]


class TableColumnPayload(DagsterBaseModel):
    name: str
    type: str | None = None
    description: str | None = None


class TableSchemaPayload(DagsterBaseModel):
    columns: list[TableColumnPayload] = Field(default_factory=list)


class TableSchemaMetadataEntryPayload(DagsterBaseModel):
    typename: Literal["TableSchemaMetadataEntry"] = Field(alias="__typename")
    label: str
    table_schema: TableSchemaPayload = Field(alias="schema")


class JsonMetadataEntryPayload(DagsterBaseModel):
    typename: Literal["JsonMetadataEntry"] = Field(alias="__typename")
    label: str
    json_string: str | None = Field(default=None, alias="jsonString")


class OtherMetadataEntryPayload(DagsterBaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    typename: str = Field(alias="__typename")
    label: str


MetadataEntryPayload = Annotated[
    TableSchemaMetadataEntryPayload | JsonMetadataEntryPayload | OtherMetadataEntryPayload,
    Field(union_mode="left_to_right"),
]


class MaterializationPayload(DagsterBaseModel):
    timestamp: str | None = None
    metadata_entries: list[MetadataEntryPayload] = Field(
        default_factory=list, alias="metadataEntries"
    )


class AssetNodePayload(DagsterBaseModel):
    id: str
    asset_key: AssetKeyPayload = Field(alias="assetKey")
    metadata_entries: list[MetadataEntryPayload] = Field(
        default_factory=list, alias="metadataEntries"
    )
    asset_materializations: list[MaterializationPayload] = Field(
        default_factory=list, alias="assetMaterializations"
    )


class AssetColumnLineageData(DagsterBaseModel):
    asset_nodes: list[AssetNodePayload] = Field(default_factory=list, alias="assetNodes")


class GraphQLErrorPayload(DagsterBaseModel):
    message: str
    path: list[str | int] | None = None


class AssetColumnLineageResponse(DagsterBaseModel):
    data: AssetColumnLineageData | None = None
    errors: list[GraphQLErrorPayload] | None = None
