"""Structured lifecycle events for contribution aggregation.

Usage
-----
>>> event_logger = AggregationEventLogger()
>>> event_logger.log_aggregation_started(username="octocat")

"""

from __future__ import annotations

import enum
import typing as typ

from octoscore.github.errors import (
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubResponseShapeError,
)
from octoscore.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import ContributionReport

logger = get_logger(__name__)


class AggregationEventType(enum.StrEnum):
    """Structured log event types for aggregation runs."""

    AGGREGATION_STARTED = "contributions.aggregation.started"
    AGGREGATION_COMPLETED = "contributions.aggregation.completed"
    AGGREGATION_FAILED = "contributions.aggregation.failed"
    SOURCE_FAILED = "contributions.source.failed"
    HYDRATION_FAILED = "contributions.repository.hydration_failed"


class ErrorCategory(enum.StrEnum):
    """Coarse failure categories used in log lines."""

    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"
    SCHEMA_DRIFT = "schema_drift"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GitHubRateLimitError, ErrorCategory.RATE_LIMITED),
    (GitHubNotFoundError, ErrorCategory.NOT_FOUND),
    (GitHubNetworkError, ErrorCategory.TRANSIENT),
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Return the category for ``exc``; order matters for subclasses."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category
    return ErrorCategory.UNKNOWN


class AggregationEventLogger:
    """Emit aggregation events via femtologging."""

    def log_aggregation_started(self, *, username: str) -> None:
        """Log the start of an aggregation run."""
        log_info(
            logger,
            "[%s] username=%s",
            AggregationEventType.AGGREGATION_STARTED,
            username,
        )

    def log_aggregation_completed(
        self,
        *,
        username: str,
        report: ContributionReport,
        duration: dt.timedelta,
    ) -> None:
        """Log a completed run with result counts."""
        log_info(
            logger,
            "[%s] username=%s duration_seconds=%.3f outcome=%s "
            "contributions=%d repositories=%d high_impact=%d failed_sources=%d",
            AggregationEventType.AGGREGATION_COMPLETED,
            username,
            duration.total_seconds(),
            report.outcome,
            report.stats.total_contributions,
            report.stats.total_repos,
            report.stats.high_impact_contributions,
            len(report.source_failures),
        )

    def log_aggregation_failed(
        self,
        *,
        username: str,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a run that ended in a terminal error."""
        log_error(
            logger,
            "[%s] username=%s duration_seconds=%.3f error_type=%s "
            "error_category=%s error_message=%s",
            AggregationEventType.AGGREGATION_FAILED,
            username,
            duration.total_seconds(),
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_source_failed(
        self,
        *,
        username: str,
        source: str,
        error: BaseException,
    ) -> None:
        """Log a tolerated failure of one activity source."""
        log_warning(
            logger,
            "[%s] username=%s source=%s error_type=%s error_category=%s "
            "error_message=%s",
            AggregationEventType.SOURCE_FAILED,
            username,
            source,
            type(error).__name__,
            categorize_error(error),
            str(error),
        )

    def log_hydration_failed(
        self,
        *,
        username: str,
        repository: str,
        error: BaseException,
    ) -> None:
        """Log a repository whose metadata could not be fetched."""
        log_warning(
            logger,
            "[%s] username=%s repository=%s error_type=%s error_category=%s",
            AggregationEventType.HYDRATION_FAILED,
            username,
            repository,
            type(error).__name__,
            categorize_error(error),
        )
