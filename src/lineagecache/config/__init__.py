"""Application configuration helpers."""

from __future__ import annotations

from .dagster import DagsterConfig, get_dagster_config
from .env import optional_env_var, optional_int_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .lineage import FetchPolicy, get_fetch_policy
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DagsterConfig",
    "FetchPolicy",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_dagster_config",
    "get_fetch_policy",
    "get_storage_config",
    "optional_env_var",
    "optional_int_env_var",
    "require_env_vars",
]
