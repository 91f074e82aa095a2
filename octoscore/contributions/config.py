"""Configuration for contribution aggregation.

Usage
-----
Create a configuration with defaults:

>>> config = AggregationConfig()
>>> config.max_repositories
25

Or load overrides from the environment:

>>> import os
>>> os.environ["OCTOSCORE_MAX_REPOSITORIES"] = "10"
>>> AggregationConfig.from_env().max_repositories
10

"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import os

_DEFAULT_MAX_REPOSITORIES = 25
_DEFAULT_MAX_CONTRIBUTIONS = 50
_DEFAULT_CACHE_TTL_S = 300


@dc.dataclass(frozen=True, slots=True)
class AggregationConfig:
    """Fetch fan-out and result limits for one aggregation.

    Attributes
    ----------
    event_pages
        Number of public event feed pages requested.
    events_per_page
        Page size for the event feed.
    pr_search_per_page
        Page size for the pull request search.
    issue_search_per_page
        Page size for the issue search.
    max_repositories
        Cap on distinct repositories hydrated per query.
    max_contributions
        Cap on ranked contributions returned.
    cache_ttl_s
        Seconds a cached GitHub response stays fresh.

    """

    event_pages: int = 3
    events_per_page: int = 100
    pr_search_per_page: int = 50
    issue_search_per_page: int = 30
    max_repositories: int = _DEFAULT_MAX_REPOSITORIES
    max_contributions: int = _DEFAULT_MAX_CONTRIBUTIONS
    cache_ttl_s: int = _DEFAULT_CACHE_TTL_S

    @property
    def cache_ttl(self) -> dt.timedelta:
        """Return the cache TTL as a timedelta."""
        return dt.timedelta(seconds=self.cache_ttl_s)

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls) -> AggregationConfig:
        """Create configuration from ``OCTOSCORE_*`` environment variables.

        Reads ``OCTOSCORE_MAX_REPOSITORIES``, ``OCTOSCORE_MAX_CONTRIBUTIONS``
        and ``OCTOSCORE_CACHE_TTL_S``.

        Raises
        ------
        ValueError
            If any of them is set but not a positive integer.

        """
        return cls(
            max_repositories=cls._parse_positive_int(
                "OCTOSCORE_MAX_REPOSITORIES", _DEFAULT_MAX_REPOSITORIES
            ),
            max_contributions=cls._parse_positive_int(
                "OCTOSCORE_MAX_CONTRIBUTIONS", _DEFAULT_MAX_CONTRIBUTIONS
            ),
            cache_ttl_s=cls._parse_positive_int(
                "OCTOSCORE_CACHE_TTL_S", _DEFAULT_CACHE_TTL_S
            ),
        )
