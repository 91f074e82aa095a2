"""Actionable, user-facing messages for aggregation outcomes."""

from __future__ import annotations

import datetime as dt

from octoscore.github.errors import (
    GitHubError,
    GitHubNetworkError,
    GitHubRateLimitError,
)

from .errors import (
    InvalidUsernameError,
    QuerySupersededError,
    SourcesUnavailableError,
    UserNotFoundError,
)

EMPTY_RESULT_MESSAGE = (
    "No open source contributions found. This could be because: "
    "1) no contributions to other users' repositories, "
    "2) all repositories are private, or "
    "3) contributions are too old to appear in the public activity feed."
)


def format_reset_time(reset_at: str | None) -> str:
    """Render an ``x-ratelimit-reset`` epoch value as a UTC time, else ``unknown``."""
    if reset_at is None or not reset_at.strip().isdigit():
        return "unknown"
    moment = dt.datetime.fromtimestamp(int(reset_at.strip()), tz=dt.UTC)
    return moment.strftime("%H:%M:%S UTC")


def _rate_limit_message(exc: GitHubRateLimitError) -> str:
    reset = format_reset_time(exc.reset_at)
    if exc.authenticated:
        return (
            "GitHub API rate limit exceeded for the configured token. "
            f"The limit resets at {reset}; try again after that."
        )
    return (
        "GitHub API rate limit exceeded for unauthenticated requests. "
        "Set OCTOSCORE_GITHUB_TOKEN to a GitHub personal access token for a "
        f"higher limit, or try again after {reset}."
    )


def describe_error(exc: BaseException) -> str:
    """Return the message a caller should show for an aggregation failure."""
    match exc:
        case InvalidUsernameError():
            return "Please enter a GitHub username."
        case UserNotFoundError():
            return "User not found. Please check the username and try again."
        case GitHubRateLimitError():
            return _rate_limit_message(exc)
        case SourcesUnavailableError():
            return (
                "GitHub activity could not be fetched from any source. "
                "Please try again shortly."
            )
        case GitHubNetworkError():
            return (
                "Failed to reach GitHub. Please check your internet connection "
                "and try again."
            )
        case QuerySupersededError():
            return "This search was replaced by a newer one."
        case GitHubError():
            return f"GitHub API error: {exc}"
        case _:
            return "Failed to fetch data. Please try again."
