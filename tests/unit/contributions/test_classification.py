"""Unit tests for turning feed events and search hits into contributions."""

from __future__ import annotations

import datetime as dt

from octoscore.contributions.classification import (
    classify_event,
    classify_search_item,
)
from octoscore.contributions.models import (
    ContributionKind,
    ContributionStatus,
    ImpactTier,
)
from tests.helpers.github_payloads import (
    event_json,
    issue_event_json,
    make_event,
    make_repository,
    make_search_item,
    pr_event_json,
    search_item_json,
)

_REPO = make_repository("acme/widgets", stars=1_500, forks=20)


class TestClassifyPullRequestEvent:
    """Pull request events."""

    def test_merged_pull_request(self, now: dt.datetime) -> None:
        """Merged PRs carry their diff size, title and Merged status."""
        event = make_event(
            pr_event_json(
                "acme/widgets",
                "Fix parser",
                merged_at="2025-05-10T00:00:00Z",
                closed_at="2025-05-10T00:00:00Z",
                additions=40,
                deletions=2,
                created_at="2025-05-10T08:30:00Z",
            )
        )

        contribution = classify_event(_REPO, event, now=now)

        assert contribution.kind is ContributionKind.PULL_REQUEST
        assert contribution.status is ContributionStatus.MERGED
        assert contribution.title == "Fix parser"
        assert contribution.lines_changed == 42
        assert contribution.impact is ImpactTier.HIGH, "2 + 3 + 0 points"
        assert contribution.date == dt.date(2025, 5, 10)
        assert contribution.description == "Pull Request in widgets"
        assert (contribution.repo, contribution.repo_owner) == ("acme/widgets", "acme")
        assert (contribution.stars, contribution.forks) == (1_500, 20)

    def test_closed_unmerged_pull_request(self, now: dt.datetime) -> None:
        """Closed PRs without a merge time are Closed."""
        event = make_event(
            pr_event_json("acme/widgets", "Nope", closed_at="2025-05-10T00:00:00Z")
        )

        contribution = classify_event(_REPO, event, now=now)

        assert contribution.status is ContributionStatus.CLOSED
        assert contribution.lines_changed == 0

    def test_open_pull_request_without_payload(self, now: dt.datetime) -> None:
        """Missing pull request payloads fall back to placeholders."""
        event = make_event(event_json("PullRequestEvent", "acme/widgets"))

        contribution = classify_event(_REPO, event, now=now)

        assert contribution.status is ContributionStatus.OPEN
        assert contribution.title == "Pull Request"
        assert contribution.impact is ImpactTier.MEDIUM, "2 + 1 + 0 points"


class TestClassifyOtherEvents:
    """Issue, push, create and unknown events."""

    def test_closed_issue(self, now: dt.datetime) -> None:
        """Closed issues earn outcome points."""
        event = make_event(
            issue_event_json(
                "acme/widgets",
                "Crash on start",
                state="closed",
                closed_at="2025-05-12T00:00:00Z",
            )
        )

        contribution = classify_event(_REPO, event, now=now)

        assert contribution.kind is ContributionKind.ISSUE
        assert contribution.status is ContributionStatus.CLOSED
        assert contribution.impact is ImpactTier.HIGH, "2 + 2 + 0 points"

    def test_open_issue(self, now: dt.datetime) -> None:
        """Open issues are Open and earn no outcome points."""
        event = make_event(issue_event_json("acme/widgets", "Idea"))

        contribution = classify_event(_REPO, event, now=now)

        assert contribution.status is ContributionStatus.OPEN
        assert contribution.impact is ImpactTier.MEDIUM

    def test_push_counts_commits(self, now: dt.datetime) -> None:
        """Push titles use the number of commits in the payload."""
        event = make_event(
            event_json(
                "PushEvent",
                "acme/widgets",
                payload={"size": 9, "commits": [{"sha": "a"}, {"sha": "b"}]},
            )
        )

        contribution = classify_event(_REPO, event, now=now)

        assert contribution.kind is ContributionKind.PUSH
        assert contribution.title == "Pushed 2 commit(s)"
        assert contribution.status is ContributionStatus.PUSHED

    def test_push_without_commits_counts_one(self, now: dt.datetime) -> None:
        """Pushes with no commit list or size count as one commit."""
        event = make_event(event_json("PushEvent", "acme/widgets"))

        assert classify_event(_REPO, event, now=now).title == "Pushed 1 commit(s)"

    def test_create_event(self, now: dt.datetime) -> None:
        """Create events are completed activity."""
        event = make_event(event_json("CreateEvent", "acme/widgets"))

        contribution = classify_event(_REPO, event, now=now)

        assert contribution.kind is ContributionKind.CREATED
        assert contribution.title == "Created activity"
        assert contribution.status is ContributionStatus.COMPLETED

    def test_unknown_event_is_other(self, now: dt.datetime) -> None:
        """Unrecognised events classify as Other without raising."""
        event = make_event(event_json("GollumEvent", "acme/widgets"))

        contribution = classify_event(_REPO, event, now=now)

        assert contribution.kind is ContributionKind.OTHER
        assert contribution.title == "Other activity"

    def test_missing_created_at_uses_today(self, now: dt.datetime) -> None:
        """Events without a timestamp are dated at the reference time."""
        data = event_json("CreateEvent", "acme/widgets")
        data["created_at"] = None

        contribution = classify_event(_REPO, make_event(data), now=now)

        assert contribution.date == now.date()


class TestClassifySearchItem:
    """Search index hits."""

    def test_merged_pull_request_hit(self, now: dt.datetime) -> None:
        """Closed PR hits with a merge time are Merged; lines are unknown."""
        item = make_search_item(
            search_item_json(
                "acme/widgets",
                "Add docs",
                pull_request=True,
                state="closed",
                merged_at="2025-05-01T00:00:00Z",
                closed_at="2025-05-01T00:00:00Z",
                updated_at="2025-05-02T00:00:00Z",
            )
        )

        contribution = classify_search_item(_REPO, item, now=now)

        assert contribution.kind is ContributionKind.PULL_REQUEST
        assert contribution.status is ContributionStatus.MERGED
        assert contribution.lines_changed == 0
        assert contribution.date == dt.date(2025, 5, 2)
        assert contribution.impact is ImpactTier.HIGH

    def test_closed_issue_hit(self, now: dt.datetime) -> None:
        """Closed issue hits are Closed and score outcome points."""
        item = make_search_item(
            search_item_json(
                "acme/widgets",
                "Bug",
                state="closed",
                closed_at="2025-05-01T00:00:00Z",
            )
        )

        contribution = classify_search_item(_REPO, item, now=now)

        assert contribution.kind is ContributionKind.ISSUE
        assert contribution.status is ContributionStatus.CLOSED
        assert contribution.impact is ImpactTier.HIGH

    def test_date_falls_back_to_created_at(self, now: dt.datetime) -> None:
        """Hits without updated_at use created_at."""
        item = make_search_item(
            search_item_json(
                "acme/widgets",
                "Bug",
                updated_at=None,
                created_at="2025-04-03T00:00:00Z",
            )
        )

        assert classify_search_item(_REPO, item, now=now).date == dt.date(2025, 4, 3)
