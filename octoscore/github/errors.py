"""GitHub REST client errors."""

from __future__ import annotations

_HTTP_NOT_FOUND = 404


class GitHubError(RuntimeError):
    """Base class for failures talking to the GitHub API."""


class GitHubAPIError(GitHubError):
    """Raised when GitHub returns a non-2xx response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Initialise with a message, HTTP status and the requested endpoint."""
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, endpoint: str) -> GitHubAPIError:
        """Return an error for a non-2xx response, 404s as ``GitHubNotFoundError``."""
        if status_code == _HTTP_NOT_FOUND:
            return GitHubNotFoundError(
                f"GitHub API HTTP {status_code} for {endpoint}",
                status_code=status_code,
                endpoint=endpoint,
            )
        return cls(
            f"GitHub API HTTP {status_code} for {endpoint}",
            status_code=status_code,
            endpoint=endpoint,
        )


class GitHubNotFoundError(GitHubAPIError):
    """Raised when the requested GitHub resource does not exist."""


class GitHubRateLimitError(GitHubAPIError):
    """Raised for 403/429 responses.

    Attributes
    ----------
    reset_at
        Raw ``x-ratelimit-reset`` header value (epoch seconds) or ``None``.
    authenticated
        Whether the request carried a bearer token.

    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        endpoint: str | None = None,
        reset_at: str | None = None,
        authenticated: bool = False,
    ) -> None:
        """Initialise with the rate-limit reset time and credential flag."""
        self.reset_at = reset_at
        self.authenticated = authenticated
        super().__init__(message, status_code=status_code, endpoint=endpoint)

    @classmethod
    def rate_limited(
        cls,
        status_code: int,
        endpoint: str,
        *,
        reset_at: str | None,
        authenticated: bool,
    ) -> GitHubRateLimitError:
        """Return an error for a rate-limited response."""
        msg = (
            f"GitHub API rate limit exceeded (HTTP {status_code}) for {endpoint}; "
            f"resets at {reset_at or 'unknown'}; authenticated={authenticated}"
        )
        return cls(
            msg,
            status_code=status_code,
            endpoint=endpoint,
            reset_at=reset_at,
            authenticated=authenticated,
        )


class GitHubNetworkError(GitHubError):
    """Raised when a request fails before a response is received."""

    @classmethod
    def timeout(cls, endpoint: str) -> GitHubNetworkError:
        """Return an error for a request that timed out."""
        return cls(f"GitHub API request timed out for {endpoint}")

    @classmethod
    def network_error(cls, endpoint: str, detail: str) -> GitHubNetworkError:
        """Return an error for DNS, connection or TLS failures."""
        return cls(f"GitHub API network error for {endpoint}: {detail}")


class GitHubResponseShapeError(GitHubError):
    """Raised when a GitHub response cannot be decoded into the expected shape."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing or malformed response field."""
        return cls(f"GitHub API response missing expected field: {field}")

    @classmethod
    def invalid_body(cls, endpoint: str) -> GitHubResponseShapeError:
        """Return an error for a successful response whose body is not JSON."""
        return cls(f"GitHub API returned a non-JSON body for {endpoint}")


class GitHubConfigError(GitHubError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def invalid_timeout(cls, raw: str) -> GitHubConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        msg = f"OCTOSCORE_GITHUB_TIMEOUT_S must be a positive number, got: {raw!r}"
        return cls(msg)
