"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import AssetNodeFetcher

__all__ = ["AssetNodeFetcher"]
