"""Unit tests for impact scoring."""

from __future__ import annotations

import datetime as dt

import pytest

from octoscore.contributions.models import ContributionKind, ImpactTier
from octoscore.contributions.scoring import (
    ContributionOutcome,
    impact_points,
    outcome_points,
    popularity_points,
    recency_points,
    score_impact,
    tier_for_points,
)
from tests.helpers.github_payloads import make_repository

_RECENT = "2025-05-25T00:00:00Z"
_STALE = "2024-01-01T00:00:00Z"


@pytest.mark.parametrize(
    ("stars", "forks", "expected"),
    [
        (10_001, 0, 4),
        (10_000, 1_001, 4),
        (10_000, 1_000, 2),
        (1_001, 0, 2),
        (0, 101, 2),
        (1_000, 100, 1),
        (101, 0, 1),
        (100, 100, 0),
        (0, 0, 0),
    ],
)
def test_popularity_points_thresholds(stars: int, forks: int, expected: int) -> None:
    """Popularity thresholds are strict greater-than comparisons."""
    assert popularity_points(stars, forks) == expected


@pytest.mark.parametrize(
    ("outcome", "expected"),
    [
        (ContributionOutcome(ContributionKind.PULL_REQUEST, merged_at=_RECENT), 3),
        (ContributionOutcome(ContributionKind.PULL_REQUEST), 1),
        (ContributionOutcome(ContributionKind.PULL_REQUEST, closed_at=_RECENT), 1),
        (ContributionOutcome(ContributionKind.ISSUE, closed_at=_RECENT), 2),
        (ContributionOutcome(ContributionKind.ISSUE), 0),
        (ContributionOutcome(ContributionKind.PUSH), 0),
        (ContributionOutcome(ContributionKind.CREATED), 0),
    ],
)
def test_outcome_points(outcome: ContributionOutcome, expected: int) -> None:
    """Merged PRs score 3, other PRs 1, closed issues 2."""
    assert outcome_points(outcome) == expected


class TestRecencyPoints:
    """Tests for recency_points."""

    def test_recent_push_scores(self, now: dt.datetime) -> None:
        """A push inside 90 days earns the bonus."""
        assert recency_points(make_repository("a/b", pushed_at=_RECENT), now) == 1

    def test_stale_push_scores_nothing(self, now: dt.datetime) -> None:
        """A push older than 90 days earns nothing."""
        assert recency_points(make_repository("a/b", pushed_at=_STALE), now) == 0

    def test_window_boundary_is_exclusive(self, now: dt.datetime) -> None:
        """Activity exactly 90 days ago no longer counts."""
        boundary = (now - dt.timedelta(days=90)).isoformat()
        assert recency_points(make_repository("a/b", pushed_at=boundary), now) == 0

    def test_missing_timestamp_scores_nothing(self, now: dt.datetime) -> None:
        """Repositories without activity timestamps get no bonus."""
        assert recency_points(make_repository("a/b", pushed_at=None), now) == 0


@pytest.mark.parametrize(
    ("points", "tier"),
    [
        (0, ImpactTier.LOW),
        (1, ImpactTier.LOW),
        (2, ImpactTier.MEDIUM),
        (3, ImpactTier.MEDIUM),
        (4, ImpactTier.HIGH),
        (5, ImpactTier.HIGH),
        (6, ImpactTier.CRITICAL),
        (8, ImpactTier.CRITICAL),
    ],
)
def test_tier_for_points(points: int, tier: ImpactTier) -> None:
    """Scores bucket at 2, 4 and 6 points."""
    assert tier_for_points(points) is tier


class TestScoreImpact:
    """Worked examples combining all three components."""

    def test_merged_pr_on_huge_active_repo_is_critical(self, now: dt.datetime) -> None:
        """4 + 3 + 1 = 8 points."""
        repository = make_repository("big/repo", stars=15_000, pushed_at=_RECENT)
        outcome = ContributionOutcome(ContributionKind.PULL_REQUEST, merged_at=_RECENT)

        assert impact_points(repository, outcome, now=now) == 8
        assert score_impact(repository, outcome, now=now) is ImpactTier.CRITICAL

    def test_open_pr_on_mid_repo_is_medium(self, now: dt.datetime) -> None:
        """2 + 1 + 0 = 3 points."""
        repository = make_repository("mid/repo", stars=1_500, pushed_at=_STALE)
        outcome = ContributionOutcome(ContributionKind.PULL_REQUEST)

        assert score_impact(repository, outcome, now=now) is ImpactTier.MEDIUM

    def test_push_on_small_stale_repo_is_low(self, now: dt.datetime) -> None:
        """0 + 0 + 0 = 0 points."""
        repository = make_repository("tiny/repo", stars=3, pushed_at=_STALE)
        outcome = ContributionOutcome(ContributionKind.PUSH)

        assert score_impact(repository, outcome, now=now) is ImpactTier.LOW


@pytest.mark.parametrize(
    ("stars", "outcome", "pushed_at", "points", "tier"),
    [
        (
            10_001,
            ContributionOutcome(ContributionKind.PULL_REQUEST, merged_at=_RECENT),
            _RECENT,
            8,
            ImpactTier.CRITICAL,
        ),
        (
            50,
            ContributionOutcome(ContributionKind.PULL_REQUEST),
            _STALE,
            1,
            ImpactTier.LOW,
        ),
    ],
)
def test_scoring_extremes(
    now: dt.datetime,
    stars: int,
    outcome: ContributionOutcome,
    pushed_at: str,
    points: int,
    tier: ImpactTier,
) -> None:
    """Score the most and least significant pull request shapes."""
    repository = make_repository("x/y", stars=stars, pushed_at=pushed_at)

    assert impact_points(repository, outcome, now=now) == points
    assert score_impact(repository, outcome, now=now) is tier
