"""Transport-level request checks run before any route body."""

from collections.abc import Callable

from fastapi import Header, Request

from translation_bridge.errors import AuthenticationError, SecurityError

BEARER_PREFIX = "Bearer "


def require_bearer(authorization: str | None = Header(default=None)) -> str:
    """Return the ``Authorization`` header unmodified, or reject the request."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError()
    return authorization


def https_guard(enabled: bool) -> Callable[[Request], None]:
    """Build a dependency that rejects plain-HTTP requests when enabled.

    ``X-Forwarded-Proto`` is honoured so the check works behind a TLS
    terminating proxy.
    """

    def check(request: Request) -> None:
        if not enabled:
            return
        forwarded = request.headers.get("x-forwarded-proto", "")
        if request.url.scheme != "https" and forwarded.lower() != "https":
            raise SecurityError()

    return check
