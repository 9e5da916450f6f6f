"""
Error taxonomy and the shared error envelope.

Every failure the bridge reports to a caller is a ``BridgeError`` subclass.
The FastAPI exception handlers in ``api/server.py`` render them through
``to_envelope()``, so all errors share one wire shape:

    {"error": {"message": "...", "type": "...", "code": "..."}}

``code`` is only present when the error carries one.

Categories:
    InvalidRequestError  - malformed request, rejected before any upstream call
    AuthenticationError  - missing or malformed bearer credential
    NotFoundError        - unknown path or method
    SecurityError        - plain HTTP when HTTPS is required
    UpstreamError        - transport failure, non-2xx status, or a 2xx body
                           that carries an error or no assistant text
    InternalError        - anything else; no internal detail is exposed
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

UPSTREAM_ERROR_PREFIX = "Upstream API error: "


@dataclass(eq=False)
class BridgeError(Exception):
    """
    Base exception for every error surfaced to a caller.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code for the response.
        error_type: Value of the envelope ``type`` field.
        code: Optional machine-readable code.
    """

    message: str
    status_code: int = 500
    error_type: str = "api_error"
    code: str | None = None

    def __str__(self) -> str:
        return self.message

    def to_envelope(self) -> dict[str, Any]:
        """Return the ``{"error": {...}}`` body for this error."""
        body: dict[str, Any] = {"message": self.message, "type": self.error_type}
        if self.code:
            body["code"] = self.code
        return {"error": body}


class InvalidRequestError(BridgeError):
    """Malformed request (missing model, no user content, bad JSON, oversized)."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message, 400, "invalid_request_error", code)


class AuthenticationError(BridgeError):
    """Missing or malformed bearer credential."""

    def __init__(self, message: str = "Missing API key") -> None:
        super().__init__(message, 401, "invalid_request_error", "invalid_api_key")


class NotFoundError(BridgeError):
    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(message, 404, "invalid_request_error")


class SecurityError(BridgeError):
    def __init__(self, message: str = "HTTPS required") -> None:
        super().__init__(message, 400, "security_error")


class UpstreamError(BridgeError):
    """
    Failure attributable to the translation engine.

    The detail message is prefixed so callers can tell upstream failures
    from local ones. ``status_code`` is the upstream status when one was
    received, otherwise 500.
    """

    def __init__(self, detail: str, status_code: int = 500) -> None:
        self.detail = detail or "unknown error"
        super().__init__(UPSTREAM_ERROR_PREFIX + self.detail, status_code, "api_error")


class InternalError(BridgeError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, 500, "api_error")
