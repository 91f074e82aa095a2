"""Shared fixtures for unit tests."""

from __future__ import annotations

import typing as typ

import pytest

from octoscore.contributions.config import AggregationConfig
from octoscore.contributions.service import ContributionAggregator
from tests.helpers.clock import FIXED_NOW, fixed_clock
from tests.helpers.github_payloads import ScriptedGitHubSource

if typ.TYPE_CHECKING:
    import datetime as dt


@pytest.fixture
def now() -> dt.datetime:
    """Reference time shared by scoring and aggregation tests."""
    return FIXED_NOW


@pytest.fixture
def github_source() -> ScriptedGitHubSource:
    """Return an empty scripted GitHub source for ``octocat``."""
    return ScriptedGitHubSource(login="octocat")


@pytest.fixture
def aggregator(github_source: ScriptedGitHubSource) -> ContributionAggregator:
    """Return an aggregator over the scripted source with a fixed clock."""
    return ContributionAggregator(
        github_source,
        config=AggregationConfig(),
        clock=fixed_clock,
    )
