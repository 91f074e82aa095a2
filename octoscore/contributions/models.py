"""Contribution records, impact tiers and aggregation results.

Output structures serialise with camelCase field names so the JSON matches
what dashboard clients render (``linesChanged``, ``totalRepos``, ...).
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import enum

import msgspec

from octoscore.github.models import GitHubUser  # noqa: TC001


class ContributionKind(enum.StrEnum):
    """What kind of activity a contribution records."""

    PULL_REQUEST = "Pull Request"
    ISSUE = "Issue"
    PUSH = "Push"
    CREATED = "Created"
    OTHER = "Other"


class ContributionStatus(enum.StrEnum):
    """Outcome state of a contribution."""

    OPEN = "Open"
    CLOSED = "Closed"
    MERGED = "Merged"
    PUSHED = "Pushed"
    COMPLETED = "Completed"


class ImpactTier(enum.StrEnum):
    """Qualitative significance bucket, ordered Low < Medium < High < Critical."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        """Return the tier's position in the total order (Low is 1)."""
        return _TIER_RANKS[self]

    @property
    def is_high_impact(self) -> bool:
        """Return True for High and Critical."""
        return self.rank >= _TIER_RANKS[ImpactTier.HIGH]


_TIER_RANKS: dict[ImpactTier, int] = {
    ImpactTier.LOW: 1,
    ImpactTier.MEDIUM: 2,
    ImpactTier.HIGH: 3,
    ImpactTier.CRITICAL: 4,
}


class Contribution(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """One normalized unit of activity against someone else's repository.

    Attributes
    ----------
    repo
        Repository full name (``owner/name``).
    repo_owner
        Repository owner login.
    kind
        Activity kind.
    title
        Human-readable title.
    impact
        Computed impact tier.
    lines_changed
        Additions plus deletions when known, otherwise 0.
    stars
        Repository star count when the contribution was computed.
    forks
        Repository fork count when the contribution was computed.
    date
        Day the activity happened (UTC).
    status
        Outcome state.
    description
        Short free-text description.

    """

    repo: str
    repo_owner: str
    kind: ContributionKind
    title: str
    impact: ImpactTier
    lines_changed: int
    stars: int
    forks: int
    date: dt.date
    status: ContributionStatus
    description: str


class ContributionStats(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Aggregate metrics over a ranked contribution list."""

    total_repos: int = 0
    total_contributions: int = 0
    high_impact_contributions: int = 0
    avg_stars: int = 0
    impact_score: int = 0
    collaboration_score: int = 0


class ReportOutcome(enum.StrEnum):
    """Whether a completed query found anything."""

    FOUND = "found"
    NO_CONTRIBUTIONS = "no_contributions"


class SourceFailure(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """A tolerated failure of one fetch source during aggregation."""

    source: str
    error_type: str
    message: str


class ContributionReport(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Result of aggregating one user's external contributions."""

    user: GitHubUser
    contributions: tuple[Contribution, ...]
    stats: ContributionStats
    outcome: ReportOutcome
    source_failures: tuple[SourceFailure, ...] = ()
    message: str | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when the query succeeded but found no contributions."""
        return self.outcome is ReportOutcome.NO_CONTRIBUTIONS
