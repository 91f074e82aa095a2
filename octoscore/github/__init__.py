"""GitHub REST access: client, response cache, typed payloads and errors."""

from __future__ import annotations

from .cache import DEFAULT_CACHE_TTL, CacheEntry, FetchCache, request_key
from .client import GitHubContributionSource, GitHubRESTClient, GitHubRESTConfig
from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubError,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubResponseShapeError,
)
from .models import (
    CONTRIBUTING_EVENT_TYPES,
    EventType,
    GitHubUser,
    RawEvent,
    RawSearchItem,
    Repository,
)

__all__ = [
    "CONTRIBUTING_EVENT_TYPES",
    "DEFAULT_CACHE_TTL",
    "CacheEntry",
    "EventType",
    "FetchCache",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubContributionSource",
    "GitHubError",
    "GitHubNetworkError",
    "GitHubNotFoundError",
    "GitHubRESTClient",
    "GitHubRESTConfig",
    "GitHubRateLimitError",
    "GitHubResponseShapeError",
    "GitHubUser",
    "RawEvent",
    "RawSearchItem",
    "Repository",
    "request_key",
]
