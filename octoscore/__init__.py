"""octoscore: rank a GitHub user's contributions to other people's repositories."""

from __future__ import annotations

from .contributions import (
    ContributionAggregator,
    ContributionReport,
    LatestQueryRunner,
)

__all__ = ["ContributionAggregator", "ContributionReport", "LatestQueryRunner"]
