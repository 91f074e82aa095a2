"""Deduplication and ranking of classified contributions."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Contribution


def deduplicate(contributions: cabc.Iterable[Contribution]) -> list[Contribution]:
    """Drop later contributions sharing a (title, repo) pair; keep the first."""
    seen: set[tuple[str, str]] = set()
    unique: list[Contribution] = []
    for contribution in contributions:
        key = (contribution.title, contribution.repo)
        if key in seen:
            continue
        seen.add(key)
        unique.append(contribution)
    return unique


def _rank_key(contribution: Contribution) -> tuple[int, int]:
    return (-contribution.impact.rank, -contribution.date.toordinal())


def rank(
    contributions: cabc.Iterable[Contribution],
    *,
    limit: int | None = None,
) -> list[Contribution]:
    """Order by impact tier descending, then date descending, and truncate.

    The sort is stable, so contributions tying on both keys keep their
    pipeline order and repeated runs over the same input agree.
    """
    ranked = sorted(contributions, key=_rank_key)
    if limit is not None:
        return ranked[:limit]
    return ranked
