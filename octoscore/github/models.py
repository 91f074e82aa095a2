"""Typed views over GitHub REST payloads used by contribution aggregation.

Only the fields the pipeline reads are declared; msgspec ignores the rest.
Every field GitHub may omit or null is optional so noisy feeds still decode.
"""

from __future__ import annotations

import enum
import typing as typ

import msgspec

from .errors import GitHubResponseShapeError


class EventType(enum.StrEnum):
    """Public event feed type tags the classifier distinguishes."""

    PULL_REQUEST = "PullRequestEvent"
    ISSUES = "IssuesEvent"
    PUSH = "PushEvent"
    CREATE = "CreateEvent"
    OTHER = "Other"

    @classmethod
    def from_tag(cls, tag: str | None) -> EventType:
        """Map a raw ``type`` tag to a member, unknown tags to ``OTHER``."""
        if tag is None:
            return cls.OTHER
        try:
            return cls(tag)
        except ValueError:
            return cls.OTHER


CONTRIBUTING_EVENT_TYPES: frozenset[EventType] = frozenset({
    EventType.PULL_REQUEST,
    EventType.ISSUES,
    EventType.PUSH,
    EventType.CREATE,
})


def _owner_of(full_name: str | None) -> str | None:
    if not full_name or "/" not in full_name:
        return None
    owner = full_name.split("/", 1)[0]
    return owner or None


class EventRepository(msgspec.Struct, kw_only=True, frozen=True):
    """Repository reference embedded in an event (``owner/name``)."""

    name: str | None = None

    @property
    def owner(self) -> str | None:
        """Return the owner segment of the full name."""
        return _owner_of(self.name)


class PullRequestPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Pull request object nested in a ``PullRequestEvent`` payload."""

    title: str | None = None
    state: str | None = None
    merged_at: str | None = None
    closed_at: str | None = None
    additions: int | None = None
    deletions: int | None = None


class IssuePayload(msgspec.Struct, kw_only=True, frozen=True):
    """Issue object nested in an ``IssuesEvent`` payload."""

    title: str | None = None
    state: str | None = None
    closed_at: str | None = None


class EventPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Union of the payload fields read across event types."""

    action: str | None = None
    pull_request: PullRequestPayload | None = None
    issue: IssuePayload | None = None
    size: int | None = None
    commits: list[dict[str, typ.Any]] | None = None
    ref_type: str | None = None


class RawEvent(msgspec.Struct, kw_only=True, frozen=True):
    """One record from ``/users/{username}/events``."""

    id: str | None = None
    type_tag: str | None = msgspec.field(default=None, name="type")
    created_at: str | None = None
    repo: EventRepository | None = None
    payload: EventPayload = msgspec.field(default_factory=EventPayload)

    @property
    def event_type(self) -> EventType:
        """Return the classified event type."""
        return EventType.from_tag(self.type_tag)

    @property
    def repo_full_name(self) -> str | None:
        """Return the referenced repository's ``owner/name``."""
        return self.repo.name if self.repo is not None else None

    @property
    def repo_owner(self) -> str | None:
        """Return the referenced repository's owner login."""
        return self.repo.owner if self.repo is not None else None


class SearchPullRequestMarker(msgspec.Struct, kw_only=True, frozen=True):
    """``pull_request`` marker present on search hits that are PRs."""

    url: str | None = None
    merged_at: str | None = None


class RawSearchItem(msgspec.Struct, kw_only=True, frozen=True):
    """One hit from ``/search/issues``."""

    title: str | None = None
    state: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    closed_at: str | None = None
    pull_request: SearchPullRequestMarker | None = None
    repository_url: str | None = None

    @property
    def is_pull_request(self) -> bool:
        """Return True when the hit is a pull request rather than an issue."""
        return self.pull_request is not None

    @property
    def merged_at(self) -> str | None:
        """Return the merge timestamp carried by the PR marker, if any."""
        return self.pull_request.merged_at if self.pull_request is not None else None

    @property
    def repo_full_name(self) -> str | None:
        """Derive ``owner/name`` from the last two segments of the repository URL."""
        if not self.repository_url:
            return None
        parts = [part for part in self.repository_url.rstrip("/").split("/") if part]
        if len(parts) < 2:  # noqa: PLR2004 - owner and name segments
            return None
        return f"{parts[-2]}/{parts[-1]}"

    @property
    def repo_owner(self) -> str | None:
        """Return the owner segment derived from the repository URL."""
        return _owner_of(self.repo_full_name)


class RepositoryOwner(msgspec.Struct, kw_only=True, frozen=True):
    """Owner object nested in repository metadata."""

    login: str | None = None


class Repository(msgspec.Struct, kw_only=True, frozen=True):
    """Hydrated repository metadata from ``/repos/{owner}/{name}``."""

    full_name: str
    name: str | None = None
    owner: RepositoryOwner | None = None
    stargazers_count: int | None = None
    forks_count: int | None = None
    pushed_at: str | None = None
    updated_at: str | None = None

    @property
    def stars(self) -> int:
        """Return the star count, 0 when unknown."""
        return self.stargazers_count or 0

    @property
    def forks(self) -> int:
        """Return the fork count, 0 when unknown."""
        return self.forks_count or 0

    @property
    def owner_login(self) -> str:
        """Return the owner login, falling back to the full name's owner."""
        if self.owner is not None and self.owner.login:
            return self.owner.login
        return _owner_of(self.full_name) or ""

    @property
    def short_name(self) -> str:
        """Return the repository name without its owner."""
        return self.name or self.full_name.rsplit("/", 1)[-1]


class GitHubUser(msgspec.Struct, kw_only=True, frozen=True):
    """Profile returned by ``/users/{username}``."""

    login: str
    name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    html_url: str | None = None
    public_repos: int | None = None


_ItemT = typ.TypeVar("_ItemT")


def _convert_items(raw: object, item_type: type[_ItemT]) -> list[_ItemT]:
    """Convert each dict in ``raw`` to ``item_type``, skipping malformed entries."""
    if not isinstance(raw, list):
        return []
    items: list[_ItemT] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            items.append(msgspec.convert(entry, type=item_type))
        except msgspec.ValidationError:
            continue
    return items


def decode_events(raw: object) -> list[RawEvent]:
    """Decode an event feed page into ``RawEvent`` records.

    Raises
    ------
    GitHubResponseShapeError
        If the page is not a JSON array.

    """
    if not isinstance(raw, list):
        raise GitHubResponseShapeError.missing("events[]")
    return _convert_items(raw, RawEvent)


def decode_search_items(raw: object) -> list[RawSearchItem]:
    """Decode a search response's ``items`` into ``RawSearchItem`` records."""
    if not isinstance(raw, dict):
        raise GitHubResponseShapeError.missing("search")
    return _convert_items(raw.get("items") or [], RawSearchItem)


def decode_repository(raw: object) -> Repository:
    """Decode repository metadata, requiring ``full_name``."""
    try:
        return msgspec.convert(raw, type=Repository)
    except msgspec.ValidationError as exc:
        raise GitHubResponseShapeError.missing("repository.full_name") from exc


def decode_user(raw: object) -> GitHubUser:
    """Decode a user profile, requiring ``login``."""
    try:
        return msgspec.convert(raw, type=GitHubUser)
    except msgspec.ValidationError as exc:
        raise GitHubResponseShapeError.missing("user.login") from exc
