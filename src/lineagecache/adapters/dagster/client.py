"""Dagster GraphQL API client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from lineagecache.adapters.http_resilience import ResilientClient

from .schema import AssetColumnLineageResponse, AssetNodePayload

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    from lineagecache.config.dagster import DagsterConfig
    from lineagecache.config.http_resilience import ResilienceConfig
    from lineagecache.domain.model import EntityKey

log = getLogger(__name__)

ASSET_COLUMN_LINEAGE_QUERY: Final[str] = """
query AssetColumnLineage($assetKeys: [AssetKeyInput!]!) {
  assetNodes(loadMaterializations: true, assetKeys: $assetKeys) {
    id
    assetKey {
      path
    }
    metadataEntries {
      __typename
      label
      ... on TableSchemaMetadataEntry {
        label
        schema {
          columns {
            name
            type
            description
          }
        }
      }
    }
    assetMaterializations(limit: 1) {
      timestamp
      metadataEntries {
        __typename
        label
        ... on TableSchemaMetadataEntry {
          label
          schema {
            columns {
              name
              type
              description
            }
          }
        }
        ... on JsonMetadataEntry {
          jsonString
        }
      }
    }
  }
}
"""


class DagsterGraphQLError(RuntimeError):
    """Raised when the Dagster GraphQL API returns errors or an unexpected payload."""

    def __init__(self, message: str, *, messages: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.messages = tuple(messages)


def should_cache_payload(payload: object) -> bool:
    """Only responses without GraphQL errors are worth caching."""

    return isinstance(payload, dict) and not payload.get("errors") and "data" in payload


def build_variables(keys: Sequence[EntityKey]) -> dict[str, object]:
    return {"assetKeys": [{"path": list(key.path)} for key in keys]}


class DagsterGraphQLClient:
    """Low-level HTTP client for the Dagster GraphQL API.

    The underlying resilient client is opened on first use and kept until
    ``aclose`` so its rate limiter and response cache span every fetch cycle.
    """

    def __init__(
        self,
        *,
        config: DagsterConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> DagsterGraphQLClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def fetch_asset_nodes(self, keys: Sequence[EntityKey]) -> list[AssetNodePayload]:
        body = {
            "operationName": "AssetColumnLineage",
            "query": ASSET_COLUMN_LINEAGE_QUERY,
            "variables": build_variables(keys),
        }
        response = await self._perform_request(client=self._session(), body=body)

        if response.errors:
            messages = [error.message for error in response.errors]
            log.error("Dagster GraphQL errors: %s", "; ".join(messages))
            raise DagsterGraphQLError(
                f"Dagster GraphQL returned {len(messages)} error(s): {messages[0]}",
                messages=messages,
            )
        if response.data is None:
            raise DagsterGraphQLError("Dagster GraphQL response carried no data")
        return response.data.asset_nodes

    def _session(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        return self._client

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        body: dict[str, object],
    ) -> AssetColumnLineageResponse:
        response = await client.post(self._config.graphql_url, json=body)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise DagsterGraphQLError("Unexpected Dagster GraphQL response payload")

        try:
            return AssetColumnLineageResponse.model_validate(payload)
        except ValidationError as exc:
            raise DagsterGraphQLError(f"Unexpected Dagster GraphQL response shape: {exc}") from exc
