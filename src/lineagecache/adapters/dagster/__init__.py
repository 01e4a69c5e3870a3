"""Dagster GraphQL adapter for column lineage."""

from __future__ import annotations

from .client import ASSET_COLUMN_LINEAGE_QUERY, DagsterGraphQLClient, DagsterGraphQLError
from .fetcher import DagsterAssetNodeFetcher, build_dagster_fetcher
from .translator import translate_asset_node

__all__ = [
    "ASSET_COLUMN_LINEAGE_QUERY",
    "DagsterAssetNodeFetcher",
    "DagsterGraphQLClient",
    "DagsterGraphQLError",
    "build_dagster_fetcher",
    "translate_asset_node",
]
