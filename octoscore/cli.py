"""Command-line entry point printing a contribution report as JSON."""

from __future__ import annotations

import argparse
import asyncio
import sys

import msgspec

from octoscore.contributions.config import AggregationConfig
from octoscore.contributions.errors import ContributionAggregationError
from octoscore.contributions.messages import describe_error
from octoscore.contributions.service import ContributionAggregator
from octoscore.github.cache import FetchCache
from octoscore.github.client import GitHubRESTClient, GitHubRESTConfig
from octoscore.github.errors import GitHubError
from octoscore.logging import configure_logging, get_logger, log_warning

logger = get_logger(__name__)


async def _run(username: str, config: GitHubRESTConfig) -> bytes:
    aggregation_config = AggregationConfig.from_env()
    client = GitHubRESTClient(
        config, cache=FetchCache(ttl=aggregation_config.cache_ttl)
    )
    try:
        aggregator = ContributionAggregator(client, config=aggregation_config)
        report = await aggregator.aggregate(username)
    finally:
        await client.aclose()
    return msgspec.json.encode(report)


def main(argv: list[str] | None = None) -> int:
    """Aggregate a user's external contributions and print the report.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success (including an empty report), 1 on failure.

    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("username", help="GitHub login to analyse")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="femtologging level (default: WARNING)",
    )
    args = parser.parse_args(argv)
    level, invalid_level = configure_logging(args.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid --log-level %r, falling back to %s",
            args.log_level,
            level,
        )

    try:
        encoded = asyncio.run(_run(args.username, GitHubRESTConfig.from_env()))
    except (ContributionAggregationError, GitHubError) as exc:
        print(describe_error(exc), file=sys.stderr)
        return 1

    print(encoded.decode("utf-8"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
