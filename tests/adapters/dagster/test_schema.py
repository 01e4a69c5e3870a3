from __future__ import annotations

from lineagecache.adapters.dagster.schema import (
    AssetColumnLineageResponse,
    AssetNodePayload,
    JsonMetadataEntryPayload,
    OtherMetadataEntryPayload,
    TableSchemaMetadataEntryPayload,
)


def test_response_validates_fixture(asset_column_lineage_payload: dict[str, object]) -> None:
    response = AssetColumnLineageResponse.model_validate(asset_column_lineage_payload)

    assert response.errors is None
    assert response.data is not None
    assert [node.asset_key.path for node in response.data.asset_nodes] == [
        ["warehouse", "orders"],
        ["warehouse", "customers"],
        ["raw", "events"],
    ]


def test_metadata_entries_are_typed_by_typename(
    asset_column_lineage_response: AssetColumnLineageResponse,
) -> None:
    assert asset_column_lineage_response.data is not None
    orders = asset_column_lineage_response.data.asset_nodes[0]
    entries = orders.asset_materializations[0].metadata_entries

    assert [type(entry) for entry in entries] == [
        OtherMetadataEntryPayload,
        TableSchemaMetadataEntryPayload,
        JsonMetadataEntryPayload,
    ]
    other, table_schema, lineage = entries
    assert isinstance(other, OtherMetadataEntryPayload)
    assert other.typename == "IntMetadataEntry"
    assert isinstance(table_schema, TableSchemaMetadataEntryPayload)
    assert [column.name for column in table_schema.table_schema.columns][-1] == "created_at"
    assert isinstance(lineage, JsonMetadataEntryPayload)
    assert lineage.json_string is not None
    assert lineage.json_string.startswith('{"id"')


def test_json_entry_without_json_string_is_accepted() -> None:
    node = AssetNodePayload.model_validate(
        {
            "id": "x",
            "assetKey": {"path": ["x"]},
            "assetMaterializations": [
                {
                    "timestamp": "1",
                    "metadataEntries": [
                        {"__typename": "JsonMetadataEntry", "label": "dagster/column_lineage"}
                    ],
                }
            ],
        }
    )

    entry = node.asset_materializations[0].metadata_entries[0]
    assert isinstance(entry, JsonMetadataEntryPayload)
    assert entry.json_string is None
    assert node.metadata_entries == []


def test_graphql_errors_are_parsed() -> None:
    response = AssetColumnLineageResponse.model_validate(
        {"data": None, "errors": [{"message": "boom", "path": ["assetNodes", 0]}]}
    )

    assert response.data is None
    assert response.errors is not None
    assert response.errors[0].message == "boom"
