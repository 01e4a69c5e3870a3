from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from lineagecache.adapters.dagster.schema import AssetColumnLineageResponse
from lineagecache.adapters.dagster.translator import translate_asset_node
from lineagecache.config.dagster import DagsterConfig
from lineagecache.config.http_resilience import ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from lineagecache.domain.model import EntityKey, RawEntity

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def asset_column_lineage_payload() -> dict[str, object]:
    path = DATA_DIR / "dagster" / "asset_column_lineage.json"
    with path.open() as handle:
        return json.load(handle)


@pytest.fixture
def asset_column_lineage_response(
    asset_column_lineage_payload: dict[str, object],
) -> AssetColumnLineageResponse:
    return AssetColumnLineageResponse.model_validate(asset_column_lineage_payload)


@pytest.fixture
def raw_entities(asset_column_lineage_response: AssetColumnLineageResponse) -> list[RawEntity]:
    assert asset_column_lineage_response.data is not None
    return [translate_asset_node(node) for node in asset_column_lineage_response.data.asset_nodes]


@pytest.fixture
def raw_entities_by_key(raw_entities: list[RawEntity]) -> dict[EntityKey, RawEntity]:
    return {entity.key: entity for entity in raw_entities}


@pytest.fixture
def dagster_config() -> DagsterConfig:
    return DagsterConfig(
        graphql_url="http://dagster.test/graphql",
        resilience=ResilienceConfig(name="dagster-test", retry=RetryPolicy(total=0), cache=None),
    )
