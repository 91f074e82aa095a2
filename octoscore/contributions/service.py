"""Aggregate a GitHub user's external contributions into a ranked report.

``ContributionAggregator`` drives the whole pipeline: resolve the user, fan
out to the event feed and search index, keep activity on repositories the
user does not own, hydrate those repositories, classify, deduplicate, rank
and summarise.

Every fetch runs as an independent task whose outcome (value or error) is
joined before the pipeline continues; one failing source never cancels its
siblings. Each call owns its accumulators, so a cancelled or superseded
query leaves nothing behind.

Usage
-----
>>> client = GitHubRESTClient(GitHubRESTConfig.from_env())
>>> aggregator = ContributionAggregator(client)
>>> report = await aggregator.aggregate("octocat")
>>> report.stats.total_contributions

"""

from __future__ import annotations

import asyncio
import dataclasses
import re
import typing as typ

from octoscore.common.time import utcnow
from octoscore.github.errors import GitHubNotFoundError, GitHubRateLimitError
from octoscore.github.models import CONTRIBUTING_EVENT_TYPES

from .classification import classify_event, classify_search_item
from .config import AggregationConfig
from .errors import (
    InvalidUsernameError,
    QuerySupersededError,
    SourcesUnavailableError,
    UserNotFoundError,
)
from .messages import EMPTY_RESULT_MESSAGE
from .models import ContributionReport, ReportOutcome, SourceFailure
from .observability import AggregationEventLogger
from .ranking import deduplicate, rank
from .summary import summarize

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from octoscore.common.time import Clock
    from octoscore.github.client import GitHubContributionSource
    from octoscore.github.models import (
        GitHubUser,
        RawEvent,
        RawSearchItem,
        Repository,
    )

    from .models import Contribution

# GitHub logins: alphanumerics and single hyphens, at most 39 characters.
_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")


@dataclasses.dataclass(frozen=True, slots=True)
class SourceOutcome[T]:
    """Joined result of one fetch task: a value or the error it raised."""

    source: str
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Return True when the task produced a value."""
        return self.error is None


async def gather_outcomes[T](
    sources: cabc.Sequence[tuple[str, cabc.Awaitable[T]]],
) -> list[SourceOutcome[T]]:
    """Await all sources concurrently and pair each with its outcome.

    Regular exceptions become failed outcomes. System-level exceptions such as
    cancellation are re-raised.
    """
    gathered = await asyncio.gather(
        *(awaitable for _, awaitable in sources),
        return_exceptions=True,
    )
    outcomes: list[SourceOutcome[T]] = []
    for (name, _), result in zip(sources, gathered, strict=True):
        if isinstance(result, Exception):
            outcomes.append(SourceOutcome(source=name, error=result))
        elif isinstance(result, BaseException):
            raise result
        else:
            outcomes.append(SourceOutcome(source=name, value=result))
    return outcomes


@dataclasses.dataclass(slots=True)
class _Activity:
    """Raw records and failures collected for one query."""

    events: list[RawEvent] = dataclasses.field(default_factory=list)
    search_items: list[RawSearchItem] = dataclasses.field(default_factory=list)
    failures: list[SourceFailure] = dataclasses.field(default_factory=list)


def normalize_username(username: str) -> str:
    """Strip whitespace and validate a GitHub login.

    Raises
    ------
    InvalidUsernameError
        If the login is empty or contains characters GitHub does not allow.

    """
    candidate = username.strip()
    if not _USERNAME_PATTERN.match(candidate):
        raise InvalidUsernameError(username)
    return candidate


def is_external(owner: str | None, username: str) -> bool:
    """Return True when ``owner`` is known and differs from ``username``."""
    if not owner:
        return False
    return owner.lower() != username.lower()


def collect_repository_names(
    events: cabc.Iterable[RawEvent],
    search_items: cabc.Iterable[RawSearchItem],
    *,
    limit: int,
) -> list[str]:
    """Return distinct repository full names in first-seen order, capped."""
    names: dict[str, None] = {}
    for name in (
        *(event.repo_full_name for event in events),
        *(item.repo_full_name for item in search_items),
    ):
        if name:
            names.setdefault(name, None)
    return list(names)[:limit]


def _failure(outcome: SourceOutcome[typ.Any]) -> SourceFailure:
    error = outcome.error
    return SourceFailure(
        source=outcome.source,
        error_type=type(error).__name__,
        message=str(error),
    )


class ContributionAggregator:
    """Build :class:`ContributionReport` objects from GitHub activity."""

    def __init__(
        self,
        client: GitHubContributionSource,
        *,
        config: AggregationConfig | None = None,
        event_logger: AggregationEventLogger | None = None,
        clock: Clock = utcnow,
    ) -> None:
        """Configure the aggregator with a GitHub source and limits.

        Parameters
        ----------
        client
            GitHub access used for every fetch; normally a cached REST client.
        config
            Fan-out and result limits. Defaults to :class:`AggregationConfig`.
        event_logger
            Structured lifecycle logger.
        clock
            Time source for recency scoring and durations.

        """
        self._client = client
        self._config = config or AggregationConfig()
        self._event_logger = event_logger or AggregationEventLogger()
        self._clock = clock

    async def aggregate(self, username: str) -> ContributionReport:
        """Aggregate ``username``'s contributions to other people's repositories.

        Returns
        -------
        ContributionReport
            Ranked contributions and stats. An empty result carries the
            ``no_contributions`` outcome and an explanatory message.

        Raises
        ------
        InvalidUsernameError
            If ``username`` is not a valid GitHub login.
        UserNotFoundError
            If the account does not exist.
        GitHubRateLimitError
            If user resolution was rate limited, or every activity source
            failed and at least one failure was a rate limit.
        SourcesUnavailableError
            If every activity source failed for other reasons.

        """
        login = normalize_username(username)
        started_at = self._clock()
        self._event_logger.log_aggregation_started(username=login)
        try:
            report = await self._aggregate(login)
        except Exception as exc:
            self._event_logger.log_aggregation_failed(
                username=login,
                error=exc,
                duration=self._clock() - started_at,
            )
            raise
        self._event_logger.log_aggregation_completed(
            username=login,
            report=report,
            duration=self._clock() - started_at,
        )
        return report

    async def _aggregate(self, username: str) -> ContributionReport:
        user = await self._resolve_user(username)
        activity = await self._fetch_activity(username)

        events = [
            event
            for event in activity.events
            if is_external(event.repo_owner, username)
        ]
        search_items = [
            item
            for item in activity.search_items
            if is_external(item.repo_owner, username)
        ]

        names = collect_repository_names(
            events, search_items, limit=self._config.max_repositories
        )
        repositories = await self._hydrate(username, names, activity.failures)

        now = self._clock()
        contributions = [
            *self._classify_events(events, repositories, now),
            *self._classify_search_items(search_items, repositories, now),
        ]
        external = [
            contribution
            for contribution in contributions
            if contribution.repo_owner.lower() != username.lower()
        ]
        ranked = rank(deduplicate(external), limit=self._config.max_contributions)

        if ranked:
            outcome, message = ReportOutcome.FOUND, None
        else:
            outcome, message = ReportOutcome.NO_CONTRIBUTIONS, EMPTY_RESULT_MESSAGE
        return ContributionReport(
            user=user,
            contributions=tuple(ranked),
            stats=summarize(ranked),
            outcome=outcome,
            source_failures=tuple(activity.failures),
            message=message,
        )

    async def _resolve_user(self, username: str) -> GitHubUser:
        try:
            return await self._client.get_user(username)
        except GitHubNotFoundError as exc:
            raise UserNotFoundError(username) from exc

    async def _fetch_activity(self, username: str) -> _Activity:
        config = self._config
        event_sources = [
            (
                f"events:page={page}",
                self._client.list_user_events(
                    username, page=page, per_page=config.events_per_page
                ),
            )
            for page in range(1, config.event_pages + 1)
        ]
        search_sources = [
            (
                "search:pr",
                self._client.search_issues(
                    f"type:pr author:{username}",
                    per_page=config.pr_search_per_page,
                ),
            ),
            (
                "search:issue",
                self._client.search_issues(
                    f"type:issue author:{username}",
                    per_page=config.issue_search_per_page,
                ),
            ),
        ]
        event_outcomes, search_outcomes = await asyncio.gather(
            gather_outcomes(event_sources),
            gather_outcomes(search_sources),
        )

        activity = _Activity()
        failed: list[SourceOutcome[typ.Any]] = []
        for outcome in event_outcomes:
            if outcome.ok and outcome.value is not None:
                activity.events.extend(outcome.value)
            elif not outcome.ok:
                failed.append(outcome)
        for outcome in search_outcomes:
            if outcome.ok and outcome.value is not None:
                activity.search_items.extend(outcome.value)
            elif not outcome.ok:
                failed.append(outcome)

        for outcome in failed:
            self._event_logger.log_source_failed(
                username=username,
                source=outcome.source,
                error=typ.cast("Exception", outcome.error),
            )
            activity.failures.append(_failure(outcome))

        if len(failed) == len(event_outcomes) + len(search_outcomes):
            self._raise_total_failure(username, failed, activity.failures)
        return activity

    @staticmethod
    def _raise_total_failure(
        username: str,
        failed: list[SourceOutcome[typ.Any]],
        failures: list[SourceFailure],
    ) -> typ.NoReturn:
        for outcome in failed:
            if isinstance(outcome.error, GitHubRateLimitError):
                raise outcome.error
        raise SourcesUnavailableError(username, failures)

    async def _hydrate(
        self,
        username: str,
        names: list[str],
        failures: list[SourceFailure],
    ) -> dict[str, Repository]:
        outcomes = await gather_outcomes([
            (f"repository:{name}", self._client.get_repository(name))
            for name in names
        ])
        repositories: dict[str, Repository] = {}
        for name, outcome in zip(names, outcomes, strict=True):
            if outcome.ok and outcome.value is not None:
                repository = outcome.value
                repositories[repository.full_name] = repository
                continue
            self._event_logger.log_hydration_failed(
                username=username,
                repository=name,
                error=typ.cast("Exception", outcome.error),
            )
            failures.append(_failure(outcome))
        return repositories

    @staticmethod
    def _classify_events(
        events: list[RawEvent],
        repositories: dict[str, Repository],
        now: dt.datetime,
    ) -> cabc.Iterator[Contribution]:
        for event in events:
            if event.event_type not in CONTRIBUTING_EVENT_TYPES:
                continue
            repository = repositories.get(event.repo_full_name or "")
            if repository is None:
                continue
            yield classify_event(repository, event, now=now)

    @staticmethod
    def _classify_search_items(
        items: list[RawSearchItem],
        repositories: dict[str, Repository],
        now: dt.datetime,
    ) -> cabc.Iterator[Contribution]:
        for item in items:
            repository = repositories.get(item.repo_full_name or "")
            if repository is None:
                continue
            yield classify_search_item(repository, item, now=now)


class LatestQueryRunner:
    """Run aggregations so that a newer query supersedes an in-flight one.

    Starting a query cancels any query this runner is still executing; the
    earlier caller receives :class:`QuerySupersededError` instead of a stale
    report.
    """

    def __init__(self, aggregator: ContributionAggregator) -> None:
        """Wrap an aggregator."""
        self._aggregator = aggregator
        self._current: asyncio.Task[ContributionReport] | None = None

    async def run(self, username: str) -> ContributionReport:
        """Aggregate ``username``, cancelling any earlier in-flight query."""
        previous = self._current
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.create_task(self._aggregator.aggregate(username))
        self._current = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._current is not task:
                raise QuerySupersededError(username) from None
            raise
        finally:
            if self._current is task:
                self._current = None
