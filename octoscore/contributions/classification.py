"""Turn raw feed events and search hits into :class:`Contribution` records.

Classification never raises: absent optional fields fall back to placeholder
titles, zero counts and the ``Other`` kind.
"""

from __future__ import annotations

import typing as typ

from octoscore.common.time import parse_github_datetime
from octoscore.github.models import EventType

from .models import Contribution, ContributionKind, ContributionStatus
from .scoring import ContributionOutcome, score_impact

if typ.TYPE_CHECKING:
    import datetime as dt

    from octoscore.github.models import RawEvent, RawSearchItem, Repository


class _Classified(typ.NamedTuple):
    kind: ContributionKind
    title: str
    status: ContributionStatus
    lines_changed: int
    outcome: ContributionOutcome


def _record_date(now: dt.datetime, *timestamps: str | None) -> dt.date:
    """Return the day of the first parseable timestamp, else today."""
    for raw in timestamps:
        parsed = parse_github_datetime(raw)
        if parsed is not None:
            return parsed.date()
    return now.date()


def _push_commit_count(event: RawEvent) -> int:
    payload = event.payload
    if payload.commits:
        return len(payload.commits)
    return payload.size or 1


def _classify_pull_request_event(event: RawEvent) -> _Classified:
    pull_request = event.payload.pull_request
    merged_at = pull_request.merged_at if pull_request else None
    closed_at = pull_request.closed_at if pull_request else None
    if merged_at:
        status = ContributionStatus.MERGED
    elif closed_at:
        status = ContributionStatus.CLOSED
    else:
        status = ContributionStatus.OPEN
    lines = 0
    if pull_request is not None:
        lines = (pull_request.additions or 0) + (pull_request.deletions or 0)
    kind = ContributionKind.PULL_REQUEST
    return _Classified(
        kind=kind,
        title=(pull_request.title if pull_request else None) or kind.value,
        status=status,
        lines_changed=lines,
        outcome=ContributionOutcome(kind=kind, merged_at=merged_at),
    )


def _classify_issue_event(event: RawEvent) -> _Classified:
    issue = event.payload.issue
    closed = issue is not None and (issue.state or "").lower() == "closed"
    kind = ContributionKind.ISSUE
    return _Classified(
        kind=kind,
        title=(issue.title if issue else None) or kind.value,
        status=ContributionStatus.CLOSED if closed else ContributionStatus.OPEN,
        lines_changed=0,
        outcome=ContributionOutcome(
            kind=kind,
            closed_at=issue.closed_at if issue else None,
        ),
    )


def _classify_activity(kind: ContributionKind) -> _Classified:
    return _Classified(
        kind=kind,
        title=f"{kind.value} activity",
        status=ContributionStatus.COMPLETED,
        lines_changed=0,
        outcome=ContributionOutcome(kind=kind),
    )


def _classify_event_kind(event: RawEvent) -> _Classified:
    match event.event_type:
        case EventType.PULL_REQUEST:
            return _classify_pull_request_event(event)
        case EventType.ISSUES:
            return _classify_issue_event(event)
        case EventType.PUSH:
            count = _push_commit_count(event)
            return _Classified(
                kind=ContributionKind.PUSH,
                title=f"Pushed {count} commit(s)",
                status=ContributionStatus.PUSHED,
                lines_changed=0,
                outcome=ContributionOutcome(kind=ContributionKind.PUSH),
            )
        case EventType.CREATE:
            return _classify_activity(ContributionKind.CREATED)
        case EventType.OTHER:
            return _classify_activity(ContributionKind.OTHER)
        case unreachable:
            typ.assert_never(unreachable)


def _build(
    repository: Repository,
    classified: _Classified,
    *,
    date: dt.date,
    now: dt.datetime,
) -> Contribution:
    return Contribution(
        repo=repository.full_name,
        repo_owner=repository.owner_login,
        kind=classified.kind,
        title=classified.title,
        impact=score_impact(repository, classified.outcome, now=now),
        lines_changed=classified.lines_changed,
        stars=repository.stars,
        forks=repository.forks,
        date=date,
        status=classified.status,
        description=f"{classified.kind.value} in {repository.short_name}",
    )


def classify_event(
    repository: Repository,
    event: RawEvent,
    *,
    now: dt.datetime,
) -> Contribution:
    """Classify one public feed event against its hydrated repository.

    Parameters
    ----------
    repository
        Repository the event references.
    event
        Raw event from the user's public feed.
    now
        Reference time for recency scoring and the missing-date fallback.

    Returns
    -------
    Contribution
        The normalized contribution.

    """
    classified = _classify_event_kind(event)
    return _build(
        repository,
        classified,
        date=_record_date(now, event.created_at),
        now=now,
    )


def classify_search_item(
    repository: Repository,
    item: RawSearchItem,
    *,
    now: dt.datetime,
) -> Contribution:
    """Classify one issue/PR search hit against its hydrated repository.

    Search payloads carry no diff stats, so ``lines_changed`` is always 0.
    """
    kind = (
        ContributionKind.PULL_REQUEST
        if item.is_pull_request
        else ContributionKind.ISSUE
    )
    if (item.state or "").lower() == "closed":
        status = (
            ContributionStatus.MERGED if item.merged_at else ContributionStatus.CLOSED
        )
    else:
        status = ContributionStatus.OPEN
    classified = _Classified(
        kind=kind,
        title=item.title or kind.value,
        status=status,
        lines_changed=0,
        outcome=ContributionOutcome(
            kind=kind,
            merged_at=item.merged_at,
            closed_at=item.closed_at,
        ),
    )
    return _build(
        repository,
        classified,
        date=_record_date(now, item.updated_at, item.created_at),
        now=now,
    )
