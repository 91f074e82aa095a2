"""Terminal failures raised by contribution aggregation."""

from __future__ import annotations

import typing as typ

from octoscore.github.errors import GitHubError

if typ.TYPE_CHECKING:
    from .models import SourceFailure


class ContributionAggregationError(Exception):
    """Base class for aggregation failures that leave no usable result."""


class InvalidUsernameError(ContributionAggregationError):
    """Raised when the queried username is empty or malformed."""

    def __init__(self, username: str) -> None:
        """Initialise with the rejected username."""
        self.username = username
        super().__init__(f"Invalid GitHub username: {username!r}")


class UserNotFoundError(ContributionAggregationError):
    """Raised when the queried GitHub account does not exist."""

    def __init__(self, username: str) -> None:
        """Initialise with the username that could not be resolved."""
        self.username = username
        super().__init__(f"GitHub user {username!r} not found")


class SourcesUnavailableError(ContributionAggregationError, GitHubError):
    """Raised when every activity source failed for reasons other than rate limits.

    Attributes
    ----------
    failures
        One entry per failed source, in fetch order.

    """

    def __init__(self, username: str, failures: typ.Sequence[SourceFailure]) -> None:
        """Initialise with the username and the per-source failures."""
        self.username = username
        self.failures = tuple(failures)
        sources = ", ".join(failure.source for failure in self.failures)
        super().__init__(
            f"All contribution sources failed for {username!r}: {sources}"
        )


class QuerySupersededError(ContributionAggregationError):
    """Raised to the caller of a query cancelled by a newer query."""

    def __init__(self, username: str) -> None:
        """Initialise with the username of the abandoned query."""
        self.username = username
        super().__init__(f"Query for {username!r} was superseded by a newer query")
