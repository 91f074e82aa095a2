"""Impact scoring for contributions.

Points are additive (popularity, outcome, recency) and then bucketed into an
:class:`ImpactTier`. Ranking and the high-impact count depend on the bucket
boundaries, so the thresholds below are fixed.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import typing as typ

from octoscore.common.time import parse_github_datetime

from .models import ContributionKind, ImpactTier

if typ.TYPE_CHECKING:
    from octoscore.github.models import Repository

RECENCY_WINDOW = dt.timedelta(days=90)

_CRITICAL_THRESHOLD = 6
_HIGH_THRESHOLD = 4
_MEDIUM_THRESHOLD = 2


@dataclasses.dataclass(frozen=True, slots=True)
class ContributionOutcome:
    """Outcome signals that feed the outcome points."""

    kind: ContributionKind
    merged_at: str | None = None
    closed_at: str | None = None


def popularity_points(stars: int, forks: int) -> int:
    """Return 4, 2, 1 or 0 points for repository popularity."""
    if stars > 10_000 or forks > 1_000:  # noqa: PLR2004
        return 4
    if stars > 1_000 or forks > 100:  # noqa: PLR2004
        return 2
    if stars > 100:  # noqa: PLR2004
        return 1
    return 0


def outcome_points(outcome: ContributionOutcome) -> int:
    """Return points for merged/open PRs and closed issues."""
    if outcome.kind is ContributionKind.PULL_REQUEST:
        return 3 if outcome.merged_at else 1
    if outcome.kind is ContributionKind.ISSUE and outcome.closed_at:
        return 2
    return 0


def recency_points(repository: Repository, now: dt.datetime) -> int:
    """Return 1 when the repository was pushed within :data:`RECENCY_WINDOW`."""
    last_activity = parse_github_datetime(
        repository.pushed_at
    ) or parse_github_datetime(repository.updated_at)
    if last_activity is None:
        return 0
    return 1 if last_activity > now - RECENCY_WINDOW else 0


def impact_points(
    repository: Repository,
    outcome: ContributionOutcome,
    *,
    now: dt.datetime,
) -> int:
    """Return the raw additive score before bucketing."""
    return (
        popularity_points(repository.stars, repository.forks)
        + outcome_points(outcome)
        + recency_points(repository, now)
    )


def tier_for_points(points: int) -> ImpactTier:
    """Bucket a raw score into an impact tier."""
    if points >= _CRITICAL_THRESHOLD:
        return ImpactTier.CRITICAL
    if points >= _HIGH_THRESHOLD:
        return ImpactTier.HIGH
    if points >= _MEDIUM_THRESHOLD:
        return ImpactTier.MEDIUM
    return ImpactTier.LOW


def score_impact(
    repository: Repository,
    outcome: ContributionOutcome,
    *,
    now: dt.datetime,
) -> ImpactTier:
    """Return the impact tier for a contribution to ``repository``.

    Parameters
    ----------
    repository
        Hydrated repository the contribution targets.
    outcome
        Contribution kind and merge/close timestamps.
    now
        Reference time for the recency bonus.

    Returns
    -------
    ImpactTier
        Critical for 6+ points, High for 4+, Medium for 2+, else Low.

    """
    return tier_for_points(impact_points(repository, outcome, now=now))
