"""Unit tests for decoding GitHub REST payloads."""

from __future__ import annotations

import pytest

from octoscore.github.errors import GitHubResponseShapeError
from octoscore.github.models import (
    EventType,
    decode_events,
    decode_repository,
    decode_search_items,
    decode_user,
)
from tests.helpers.github_payloads import (
    event_json,
    pr_event_json,
    repository_json,
    search_item_json,
    user_json,
)


class TestDecodeEvents:
    """Tests for decode_events."""

    def test_decodes_pull_request_event(self) -> None:
        """Nested pull request fields and the repo owner are exposed."""
        data = pr_event_json(
            "acme/widgets",
            "Fix parser",
            merged_at="2025-05-10T00:00:00Z",
            closed_at="2025-05-10T00:00:00Z",
            additions=10,
            deletions=2,
        )

        (event,) = decode_events([data])

        assert event.event_type is EventType.PULL_REQUEST
        assert event.repo_full_name == "acme/widgets"
        assert event.repo_owner == "acme"
        assert event.payload.pull_request is not None
        assert event.payload.pull_request.additions == 10

    def test_unknown_type_maps_to_other(self) -> None:
        """Unrecognised event tags classify as Other."""
        (event,) = decode_events([event_json("WatchEvent", "acme/widgets")])
        assert event.event_type is EventType.OTHER

    def test_skips_malformed_entries(self) -> None:
        """Non-object entries and entries with wrong field types are dropped."""
        good = event_json("PushEvent", "acme/widgets")
        bad = event_json("PushEvent", "acme/widgets")
        bad["repo"] = "not-an-object"

        events = decode_events([good, "junk", bad, None])

        assert [e.event_type for e in events] == [EventType.PUSH]

    def test_rejects_non_list(self) -> None:
        """A feed page must be a JSON array."""
        with pytest.raises(GitHubResponseShapeError, match="events"):
            decode_events({"message": "oops"})


class TestDecodeSearchItems:
    """Tests for decode_search_items."""

    def test_derives_repository_from_url(self) -> None:
        """The last two repository_url segments give owner/name."""
        data = search_item_json(
            "acme/widgets",
            "Add docs",
            pull_request=True,
            state="closed",
            merged_at="2025-05-01T00:00:00Z",
        )

        (item,) = decode_search_items({"total_count": 1, "items": [data]})

        assert item.repo_full_name == "acme/widgets"
        assert item.repo_owner == "acme"
        assert item.is_pull_request
        assert item.merged_at == "2025-05-01T00:00:00Z"

    def test_issue_hit_has_no_pull_request_marker(self) -> None:
        """Issue hits are not pull requests and carry no merge time."""
        (item,) = decode_search_items({"items": [search_item_json("a/b", "Bug")]})
        assert not item.is_pull_request
        assert item.merged_at is None

    def test_missing_items_yields_empty_list(self) -> None:
        """A response without items decodes to nothing."""
        assert decode_search_items({"total_count": 0}) == []

    def test_rejects_non_object(self) -> None:
        """A search response must be a JSON object."""
        with pytest.raises(GitHubResponseShapeError):
            decode_search_items([])


class TestDecodeRepositoryAndUser:
    """Tests for decode_repository and decode_user."""

    def test_repository_counts_default_to_zero(self) -> None:
        """Null star and fork counts read as 0."""
        data = repository_json("acme/widgets")
        data["stargazers_count"] = None
        data["forks_count"] = None

        repository = decode_repository(data)

        assert (repository.stars, repository.forks) == (0, 0)
        assert repository.owner_login == "acme"
        assert repository.short_name == "widgets"

    def test_repository_requires_full_name(self) -> None:
        """Metadata without full_name is a shape error."""
        with pytest.raises(GitHubResponseShapeError, match="full_name"):
            decode_repository({"name": "widgets"})

    def test_user_requires_login(self) -> None:
        """Profiles without a login are a shape error."""
        assert decode_user(user_json("octocat")).login == "octocat"
        with pytest.raises(GitHubResponseShapeError, match="login"):
            decode_user({"name": "Nobody"})
