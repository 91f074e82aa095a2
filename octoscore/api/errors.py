"""Falcon error handlers mapping aggregation failures to JSON responses.

Usage
-----
Register the handlers on the Falcon app::

    from octoscore.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from octoscore.contributions.errors import (
    InvalidUsernameError,
    SourcesUnavailableError,
    UserNotFoundError,
)
from octoscore.contributions.messages import describe_error, format_reset_time
from octoscore.github.errors import GitHubError, GitHubRateLimitError

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = [
    "handle_github_error",
    "handle_invalid_username",
    "handle_rate_limited",
    "handle_user_not_found",
    "register_error_handlers",
]


async def handle_invalid_username(
    _req: Request,
    resp: Response,
    ex: InvalidUsernameError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidUsernameError`` to HTTP 400."""
    resp.status = falcon.HTTP_400
    resp.media = {
        "title": "Invalid username",
        "description": describe_error(ex),
        "field": "username",
    }


async def handle_user_not_found(
    _req: Request,
    resp: Response,
    ex: UserNotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``UserNotFoundError`` to HTTP 404."""
    resp.status = falcon.HTTP_404
    resp.media = {
        "title": "User not found",
        "description": describe_error(ex),
        "username": ex.username,
    }


async def handle_rate_limited(
    _req: Request,
    resp: Response,
    ex: GitHubRateLimitError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``GitHubRateLimitError`` to HTTP 429 with the reset time.

    ``reset_at`` is the verbatim ``x-ratelimit-reset`` value from GitHub.
    """
    resp.status = falcon.HTTP_429
    resp.media = {
        "title": "GitHub rate limit exceeded",
        "description": describe_error(ex),
        "reset_at": ex.reset_at,
        "resets": format_reset_time(ex.reset_at),
        "authenticated": ex.authenticated,
    }


async def handle_github_error(
    _req: Request,
    resp: Response,
    ex: GitHubError,
    _params: dict[str, typ.Any],
) -> None:
    """Map remaining GitHub failures to HTTP 502."""
    resp.status = falcon.HTTP_502
    media: dict[str, typ.Any] = {
        "title": "GitHub unavailable",
        "description": describe_error(ex),
    }
    if isinstance(ex, SourcesUnavailableError):
        media["failed_sources"] = [failure.source for failure in ex.failures]
    resp.media = media


def register_error_handlers(app: App) -> None:
    """Register every aggregation error handler on ``app``.

    Falcon picks the most specific handler, so ``GitHubRateLimitError`` wins
    over the generic ``GitHubError`` handler.
    """
    app.add_error_handler(InvalidUsernameError, handle_invalid_username)
    app.add_error_handler(UserNotFoundError, handle_user_not_found)
    app.add_error_handler(GitHubError, handle_github_error)
    app.add_error_handler(GitHubRateLimitError, handle_rate_limited)
