"""Dagster GraphQL endpoint configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy, ShouldCacheHook

DAGSTER_TIMEOUT_SECONDS: Final[float] = 30.0
DAGSTER_API_TOKEN_HEADER: Final[str] = "Dagster-Cloud-Api-Token"
HTTP_CACHE_BACKENDS: Final[tuple[str, ...]] = ("off", "memory", "sqlite")


@dataclass(frozen=True, slots=True)
class DagsterConfig:
    """Where and how to reach the Dagster GraphQL API."""

    graphql_url: str
    resilience: ResilienceConfig


def get_dagster_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> DagsterConfig:
    values = require_env_vars(("DAGSTER_GRAPHQL_URL",))
    graphql_url = values["DAGSTER_GRAPHQL_URL"]

    headers: dict[str, str] = {}
    token = optional_env_var("DAGSTER_CLOUD_API_TOKEN")
    if token is not None:
        headers[DAGSTER_API_TOKEN_HEADER] = token

    return DagsterConfig(
        graphql_url=graphql_url,
        resilience=resilience
        or ResilienceConfig(
            name="dagster",
            timeout_seconds=DAGSTER_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=_http_cache_config(cache_predicate),
            default_headers=headers or None,
        ),
    )


def _http_cache_config(cache_predicate: ShouldCacheHook | None) -> CacheConfig | None:
    backend = (optional_env_var("LINEAGECACHE_HTTP_CACHE") or "off").lower()
    if backend not in HTTP_CACHE_BACKENDS:
        allowed = ", ".join(HTTP_CACHE_BACKENDS)
        raise ConfigurationError(
            f"LINEAGECACHE_HTTP_CACHE must be one of {allowed}, got {backend!r}"
        )
    if backend == "off":
        return None
    if backend == "sqlite":
        return CacheConfig(backend="sqlite", should_cache=cache_predicate)
    return CacheConfig(backend="memory", should_cache=cache_predicate)
