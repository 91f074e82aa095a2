"""Unit tests for GET /contributions/{username} and its error mapping."""

from __future__ import annotations

import falcon
import falcon.testing
import pytest

from octoscore.api.app import AppDependencies, create_app
from octoscore.contributions.service import ContributionAggregator
from octoscore.github.errors import GitHubNetworkError, GitHubRateLimitError
from tests.helpers.clock import fixed_clock
from tests.helpers.github_payloads import (
    ScriptedGitHubSource,
    pr_event_json,
    repository_json,
)

_ACTIVITY_SOURCES = ("events:1", "events:2", "events:3", "search:pr", "search:issue")


@pytest.fixture
def source() -> ScriptedGitHubSource:
    """Return the scripted GitHub source behind the app."""
    return ScriptedGitHubSource(login="octocat")


@pytest.fixture
def client(source: ScriptedGitHubSource) -> falcon.testing.TestClient:
    """Build a test client over ``source``."""
    aggregator = ContributionAggregator(source, clock=fixed_clock)
    return falcon.testing.TestClient(create_app(AppDependencies(aggregator=aggregator)))


def test_report_serializes_camel_case(
    client: falcon.testing.TestClient, source: ScriptedGitHubSource
) -> None:
    """A populated report uses camelCase keys and ISO dates."""
    source.events[1] = [
        pr_event_json(
            "acme/widgets",
            "Fix parser",
            merged_at="2025-05-10T00:00:00Z",
            closed_at="2025-05-10T00:00:00Z",
            additions=3,
            deletions=1,
            created_at="2025-05-10T00:00:00Z",
        )
    ]
    source.repositories = {
        "acme/widgets": repository_json("acme/widgets", stars=20_000)
    }

    result = client.simulate_get("/contributions/octocat")

    assert result.status == falcon.HTTP_200
    body = result.json
    assert body["outcome"] == "found"
    assert body["user"]["login"] == "octocat"
    (contribution,) = body["contributions"]
    assert contribution == {
        "repo": "acme/widgets",
        "repoOwner": "acme",
        "kind": "Pull Request",
        "title": "Fix parser",
        "impact": "Critical",
        "linesChanged": 4,
        "stars": 20_000,
        "forks": 0,
        "date": "2025-05-10",
        "status": "Merged",
        "description": "Pull Request in widgets",
    }
    assert body["stats"]["totalRepos"] == 1
    assert body["stats"]["impactScore"] == 100
    assert body["sourceFailures"] == []


def test_empty_report_is_ok_with_message(client: falcon.testing.TestClient) -> None:
    """No contributions is a successful response with an explanation."""
    result = client.simulate_get("/contributions/octocat")

    assert result.status == falcon.HTTP_200
    assert result.json["outcome"] == "no_contributions"
    assert result.json["message"].startswith("No open source contributions found.")


def test_invalid_username_is_bad_request(client: falcon.testing.TestClient) -> None:
    """Malformed usernames map to HTTP 400."""
    result = client.simulate_get("/contributions/-bad-")

    assert result.status == falcon.HTTP_400
    assert result.json["field"] == "username"


def test_unknown_user_is_not_found(client: falcon.testing.TestClient) -> None:
    """Unknown users map to HTTP 404."""
    result = client.simulate_get("/contributions/ghost")

    assert result.status == falcon.HTTP_404
    assert result.json["username"] == "ghost"
    assert result.json["description"].startswith("User not found.")


def test_rate_limit_is_too_many_requests(
    client: falcon.testing.TestClient, source: ScriptedGitHubSource
) -> None:
    """Rate limits map to HTTP 429 with the reset time."""
    source.failures["user"] = GitHubRateLimitError.rate_limited(
        403, "/users/octocat", reset_at="1748779200", authenticated=False
    )

    result = client.simulate_get("/contributions/octocat")

    assert result.status == falcon.HTTP_429
    assert result.json["reset_at"] == "1748779200"
    assert result.json["resets"] == "12:00:00 UTC"
    assert result.json["authenticated"] is False


def test_total_source_failure_is_bad_gateway(
    client: falcon.testing.TestClient, source: ScriptedGitHubSource
) -> None:
    """Every activity source failing maps to HTTP 502 listing the sources."""
    for name in _ACTIVITY_SOURCES:
        source.failures[name] = GitHubNetworkError.timeout("/x")

    result = client.simulate_get("/contributions/octocat")

    assert result.status == falcon.HTTP_502
    assert result.json["failed_sources"] == [
        "events:page=1",
        "events:page=2",
        "events:page=3",
        "search:pr",
        "search:issue",
    ]
