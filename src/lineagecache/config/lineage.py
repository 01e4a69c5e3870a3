"""Fetch-cycle policy for the lineage cache."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_int_env_var


@dataclass(frozen=True, slots=True)
class FetchPolicy:
    """How the fetch coordinator reacts to failed cycles.

    Failed cycles are never retried automatically; the next re-evaluation with
    keys still missing issues a new fetch. ``max_failed_cycles`` bounds how many
    consecutive failures are tolerated before the coordinator stops issuing
    fetches until ``reset_failures`` is called. ``None`` never gives up.
    """

    max_failed_cycles: int | None = None

    def exhausted(self, failed_cycles: int) -> bool:
        if self.max_failed_cycles is None:
            return False
        return failed_cycles >= self.max_failed_cycles


def get_fetch_policy() -> FetchPolicy:
    return FetchPolicy(
        max_failed_cycles=optional_int_env_var("LINEAGECACHE_MAX_FAILED_CYCLES", minimum=1)
    )
