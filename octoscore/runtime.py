"""octoscore runtime entrypoint.

Builds the Falcon ASGI app with a shared, cached GitHub REST client and
serves it with Granian.

Configuration is driven by environment variables:

- ``OCTOSCORE_HOST``: Bind address (default ``0.0.0.0``)
- ``OCTOSCORE_PORT``: Listen port (default ``8080``)
- ``OCTOSCORE_LOG_LEVEL``: Log level (default ``INFO``)
- ``OCTOSCORE_GITHUB_TOKEN``: Optional GitHub token (falls back to
  ``GITHUB_TOKEN``); without one requests are anonymous
- ``OCTOSCORE_MAX_REPOSITORIES``, ``OCTOSCORE_MAX_CONTRIBUTIONS``,
  ``OCTOSCORE_CACHE_TTL_S``: aggregation limits

Run the service directly with ``python -m octoscore.runtime``.
"""

from __future__ import annotations

import dataclasses
import os
import typing as typ

from octoscore.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["ServerSettings", "create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(raw: str) -> int:
    """Return ``raw`` as a TCP port, exiting with status 1 when it is not one."""
    port = int(raw) if raw.strip().isdigit() else None
    if port is None or not (_MIN_PORT <= port <= _MAX_PORT):
        log_error(
            logger,
            "OCTOSCORE_PORT must be an integer in %d-%d, got %r",
            _MIN_PORT,
            _MAX_PORT,
            raw,
        )
        raise SystemExit(1)
    return port


@dataclasses.dataclass(frozen=True, slots=True)
class ServerSettings:
    """Bind address and log level for the Granian server."""

    host: str
    port: int
    log_level: str

    @classmethod
    def from_env(cls) -> ServerSettings:
        """Read ``OCTOSCORE_HOST``, ``OCTOSCORE_PORT`` and ``OCTOSCORE_LOG_LEVEL``."""
        return cls(
            host=os.environ.get("OCTOSCORE_HOST", "0.0.0.0"),  # noqa: S104
            port=_parse_port(os.environ.get("OCTOSCORE_PORT", "8080")),
            log_level=os.environ.get("OCTOSCORE_LOG_LEVEL", "INFO"),
        )


def create_app() -> falcon.asgi.App:
    """Create the Falcon app with an environment-configured aggregator."""
    from octoscore.api.app import AppDependencies
    from octoscore.api.app import create_app as _create_api_app
    from octoscore.contributions.config import AggregationConfig
    from octoscore.contributions.service import ContributionAggregator
    from octoscore.github.cache import FetchCache
    from octoscore.github.client import GitHubRESTClient, GitHubRESTConfig

    github_config = GitHubRESTConfig.from_env()
    aggregation_config = AggregationConfig.from_env()
    if not github_config.authenticated:
        log_warning(
            logger,
            "No GitHub token configured; using the unauthenticated rate limit",
        )

    client = GitHubRESTClient(
        github_config,
        cache=FetchCache(ttl=aggregation_config.cache_ttl),
    )
    aggregator = ContributionAggregator(client, config=aggregation_config)
    return _create_api_app(AppDependencies(aggregator=aggregator))


def main() -> None:
    """Start the octoscore server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    settings = ServerSettings.from_env()
    level, invalid = configure_logging(settings.log_level)
    if invalid:
        log_warning(
            logger,
            "Unknown OCTOSCORE_LOG_LEVEL %r; using %s",
            settings.log_level,
            level,
        )
    log_info(
        logger,
        "[runtime.start] host=%s port=%d log_level=%s",
        settings.host,
        settings.port,
        level,
    )

    server = Granian(
        "octoscore.runtime:create_app",
        address=settings.host,
        port=settings.port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
