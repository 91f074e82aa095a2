"""Async GitHub REST client used by contribution aggregation."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

import httpx

from octoscore.logging import get_logger, log_debug

from .cache import FetchCache, request_key
from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubNetworkError,
    GitHubRateLimitError,
    GitHubResponseShapeError,
)
from .models import (
    GitHubUser,
    RawEvent,
    RawSearchItem,
    Repository,
    decode_events,
    decode_repository,
    decode_search_items,
    decode_user,
)

logger = get_logger(__name__)

_DEFAULT_BASE_URL = "https://api.github.com"
_DEFAULT_TIMEOUT_S = 20.0
_HTTP_ERROR_STATUS_THRESHOLD = 400
_RATE_LIMIT_STATUSES = frozenset({403, 429})
_RATE_LIMIT_HEADERS = (
    "x-ratelimit-limit",
    "x-ratelimit-remaining",
    "x-ratelimit-reset",
    "x-ratelimit-used",
)


class GitHubContributionSource(typ.Protocol):
    """Interface the aggregation pipeline needs from a GitHub client."""

    async def get_user(self, username: str) -> GitHubUser:
        """Return the profile of ``username``."""
        ...

    async def list_user_events(
        self, username: str, *, page: int, per_page: int
    ) -> list[RawEvent]:
        """Return one page of the user's public event feed."""
        ...

    async def search_issues(
        self, query: str, *, per_page: int, sort: str = "updated"
    ) -> list[RawSearchItem]:
        """Return search-index hits for an issue/PR query."""
        ...

    async def get_repository(self, full_name: str) -> Repository:
        """Return metadata for ``owner/name``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRESTConfig:
    """Configuration for the GitHub REST API client.

    A missing token is valid; requests are then anonymous and subject to the
    lower unauthenticated rate limit.
    """

    token: str | None = None
    base_url: str = _DEFAULT_BASE_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "octoscore/0.1"

    @property
    def authenticated(self) -> bool:
        """Return True when a non-empty token is configured."""
        return bool(self.token and self.token.strip())

    @classmethod
    def from_env(cls) -> GitHubRESTConfig:
        """Build configuration from ``OCTOSCORE_GITHUB_*`` environment variables.

        ``OCTOSCORE_GITHUB_TOKEN`` falls back to ``GITHUB_TOKEN``.
        """
        token = (
            os.environ.get("OCTOSCORE_GITHUB_TOKEN", "").strip()
            or os.environ.get("GITHUB_TOKEN", "").strip()
        )
        base_url = os.environ.get("OCTOSCORE_GITHUB_API_URL", "").strip()
        raw_timeout = os.environ.get("OCTOSCORE_GITHUB_TIMEOUT_S", "").strip()
        timeout_s = _DEFAULT_TIMEOUT_S
        if raw_timeout:
            try:
                timeout_s = float(raw_timeout)
            except ValueError as exc:
                raise GitHubConfigError.invalid_timeout(raw_timeout) from exc
            if timeout_s <= 0:
                raise GitHubConfigError.invalid_timeout(raw_timeout)
        return cls(
            token=token or None,
            base_url=base_url or _DEFAULT_BASE_URL,
            timeout_s=timeout_s,
        )


def _build_headers(config: GitHubRESTConfig) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": config.user_agent,
    }
    if config.authenticated and config.token is not None:
        headers["Authorization"] = f"Bearer {config.token.strip()}"
    return headers


class GitHubRESTClient:
    """GitHub REST implementation of :class:`GitHubContributionSource`.

    Every GET goes through a :class:`FetchCache`, so repeated requests for
    the same endpoint and parameters within the TTL hit the network once.
    """

    def __init__(
        self,
        config: GitHubRESTConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        cache: FetchCache | None = None,
    ) -> None:
        """Initialise the client; an injected ``http_client`` is not closed here."""
        self._config = config
        self._cache = cache if cache is not None else FetchCache()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._base_url = config.base_url.rstrip("/")
        self._headers = _build_headers(config)

    @property
    def authenticated(self) -> bool:
        """Return True when requests carry a bearer token."""
        return self._config.authenticated

    @property
    def cache(self) -> FetchCache:
        """Return the response cache backing this client."""
        return self._cache

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def get_user(self, username: str) -> GitHubUser:
        """Return the profile for ``username``.

        Raises
        ------
        GitHubNotFoundError
            If the account does not exist.

        """
        return decode_user(await self._get(f"/users/{username}"))

    async def list_user_events(
        self, username: str, *, page: int, per_page: int = 100
    ) -> list[RawEvent]:
        """Return one page of the user's public event feed, newest first."""
        payload = await self._get(
            f"/users/{username}/events",
            {"per_page": per_page, "page": page},
        )
        return decode_events(payload)

    async def search_issues(
        self, query: str, *, per_page: int, sort: str = "updated"
    ) -> list[RawSearchItem]:
        """Return issue/PR search hits for ``query``."""
        payload = await self._get(
            "/search/issues",
            {"q": query, "sort": sort, "per_page": per_page},
        )
        return decode_search_items(payload)

    async def get_repository(self, full_name: str) -> Repository:
        """Return repository metadata for ``owner/name``."""
        return decode_repository(await self._get(f"/repos/{full_name}"))

    async def _get(
        self, path: str, params: dict[str, typ.Any] | None = None
    ) -> typ.Any:
        """Issue a cached GET and return the decoded JSON body."""
        key = request_key(path, params)
        return await self._cache.get(key, lambda: self._fetch(path, params, key))

    async def _fetch(
        self, path: str, params: dict[str, typ.Any] | None, key: str
    ) -> typ.Any:
        try:
            response = await self._client.get(
                f"{self._base_url}{path}", params=params, headers=self._headers
            )
        except httpx.TimeoutException as exc:
            raise GitHubNetworkError.timeout(key) from exc
        except httpx.RequestError as exc:
            raise GitHubNetworkError.network_error(key, str(exc)) from exc

        self._log_rate_limit(key, response)
        self._check_response_errors(key, response)
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubResponseShapeError.invalid_body(key) from exc

    def _check_response_errors(self, key: str, response: httpx.Response) -> None:
        status = response.status_code
        if status in _RATE_LIMIT_STATUSES:
            raise GitHubRateLimitError.rate_limited(
                status,
                key,
                reset_at=response.headers.get("x-ratelimit-reset"),
                authenticated=self.authenticated,
            )
        if status >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(status, key)

    @staticmethod
    def _log_rate_limit(key: str, response: httpx.Response) -> None:
        limit, remaining, reset, used = (
            response.headers.get(name) for name in _RATE_LIMIT_HEADERS
        )
        log_debug(
            logger,
            "[github.response] endpoint=%s status=%d ratelimit_limit=%s "
            "ratelimit_remaining=%s ratelimit_reset=%s ratelimit_used=%s",
            key,
            response.status_code,
            limit,
            remaining,
            reset,
            used,
        )
