"""Application factory for the octoscore Falcon ASGI application.

Usage
-----
Create a health-only app::

    app = create_app()

Create an app serving contribution reports::

    from octoscore.api.app import AppDependencies, create_app

    app = create_app(AppDependencies(aggregator=aggregator))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from octoscore.api.errors import register_error_handlers
from octoscore.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from octoscore.contributions.service import ContributionAggregator

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Collaborators for the Falcon application.

    Attributes
    ----------
    aggregator
        Aggregator backing ``GET /contributions/{username}``. When ``None``
        only the health endpoints are registered.

    """

    aggregator: ContributionAggregator | None = None


def create_app(dependencies: AppDependencies | None = None) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies.

    Returns
    -------
    falcon.asgi.App
        Configured application.

    """
    aggregator = dependencies.aggregator if dependencies is not None else None

    app = falcon.asgi.App()
    app.add_route("/health", HealthResource())
    app.add_route(
        "/ready", ReadyResource(aggregation_enabled=aggregator is not None)
    )

    if aggregator is not None:
        from octoscore.api.contributions.resources import ContributionsResource

        app.add_route("/contributions/{username}", ContributionsResource(aggregator))

    register_error_handlers(app)
    return app
