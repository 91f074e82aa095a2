"""Contribution aggregation, classification, impact scoring and summaries."""

from __future__ import annotations

from .classification import classify_event, classify_search_item
from .config import AggregationConfig
from .errors import (
    ContributionAggregationError,
    InvalidUsernameError,
    QuerySupersededError,
    SourcesUnavailableError,
    UserNotFoundError,
)
from .messages import EMPTY_RESULT_MESSAGE, describe_error
from .models import (
    Contribution,
    ContributionKind,
    ContributionReport,
    ContributionStats,
    ContributionStatus,
    ImpactTier,
    ReportOutcome,
    SourceFailure,
)
from .observability import AggregationEventLogger, AggregationEventType
from .ranking import deduplicate, rank
from .scoring import ContributionOutcome, score_impact
from .service import ContributionAggregator, LatestQueryRunner
from .summary import summarize

__all__ = [
    "EMPTY_RESULT_MESSAGE",
    "AggregationConfig",
    "AggregationEventLogger",
    "AggregationEventType",
    "Contribution",
    "ContributionAggregationError",
    "ContributionAggregator",
    "ContributionKind",
    "ContributionOutcome",
    "ContributionReport",
    "ContributionStats",
    "ContributionStatus",
    "ImpactTier",
    "InvalidUsernameError",
    "LatestQueryRunner",
    "QuerySupersededError",
    "ReportOutcome",
    "SourceFailure",
    "SourcesUnavailableError",
    "UserNotFoundError",
    "classify_event",
    "classify_search_item",
    "deduplicate",
    "describe_error",
    "rank",
    "score_impact",
    "summarize",
]
