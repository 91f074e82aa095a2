"""Summary statistics over a ranked contribution list."""

from __future__ import annotations

import math
import typing as typ

from .models import ContributionStats

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import Contribution

_MAX_COLLABORATION_SCORE = 100
_REPO_WEIGHT = 10
_HIGH_IMPACT_WEIGHT = 15


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up.

    Python's ``round`` uses banker's rounding; dashboard figures round .5 up.
    """
    return math.floor(value + 0.5)


def summarize(contributions: cabc.Sequence[Contribution]) -> ContributionStats:
    """Derive aggregate metrics; an empty input yields all-zero stats."""
    total = len(contributions)
    if total == 0:
        return ContributionStats()

    total_repos = len({contribution.repo for contribution in contributions})
    high_impact = sum(
        1 for contribution in contributions if contribution.impact.is_high_impact
    )
    star_sum = sum(contribution.stars for contribution in contributions)
    collaboration = total_repos * _REPO_WEIGHT + high_impact * _HIGH_IMPACT_WEIGHT
    return ContributionStats(
        total_repos=total_repos,
        total_contributions=total,
        high_impact_contributions=high_impact,
        avg_stars=round_half_up(star_sum / total),
        impact_score=round_half_up(100 * high_impact / total),
        collaboration_score=min(_MAX_COLLABORATION_SCORE, round_half_up(collaboration)),
    )
