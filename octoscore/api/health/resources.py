"""Liveness and readiness probe resources.

Usage
-----
>>> app.add_route("/health", HealthResource())
>>> app.add_route("/ready", ReadyResource())

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe reporting whether contribution endpoints are mounted."""

    def __init__(self, *, aggregation_enabled: bool = False) -> None:
        """Record whether the app was built with an aggregator."""
        self._aggregation_enabled = aggregation_enabled

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready."""
        resp.media = {
            "status": "ready",
            "aggregation": self._aggregation_enabled,
        }
        resp.status = HTTPStatus.OK
