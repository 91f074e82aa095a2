"""Contribution report resource.

``GET /contributions/{username}`` aggregates the user's contributions to
repositories they do not own and returns the ranked report. Both a populated
report and the ``no_contributions`` outcome return HTTP 200; failures are
mapped by the handlers in :mod:`octoscore.api.errors`.

Usage
-----
>>> app.add_route(
...     "/contributions/{username}",
...     ContributionsResource(aggregator),
... )

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from octoscore.contributions.models import ContributionReport
    from octoscore.contributions.service import ContributionAggregator

__all__ = ["ContributionsResource", "serialize_report"]


def serialize_report(report: ContributionReport) -> dict[str, typ.Any]:
    """Convert a report to JSON-compatible builtins (camelCase keys)."""
    return typ.cast("dict[str, typ.Any]", msgspec.to_builtins(report))


class ContributionsResource:
    """Resource serving contribution reports per GitHub user."""

    def __init__(self, aggregator: ContributionAggregator) -> None:
        """Configure the resource with the aggregator it delegates to."""
        self._aggregator = aggregator

    async def on_get(self, _req: Request, resp: Response, *, username: str) -> None:
        """Handle GET /contributions/{username}."""
        report = await self._aggregator.aggregate(username)
        resp.media = serialize_report(report)
        resp.status = falcon.HTTP_200
