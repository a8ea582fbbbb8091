"""Error types raised by the REST client."""

from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """Base class for failed API calls."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def server_message(self) -> Optional[str]:
        """The ``message`` field of a JSON error body, when the server sent one."""
        if isinstance(self.payload, dict):
            message = self.payload.get("message")
            if isinstance(message, str) and message.strip():
                return message
        return None

    def user_message(self, fallback: str) -> str:
        return self.server_message or fallback

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={self.message!r})"


class ValidationError(ApiError):
    """400/422: the server rejected the submitted data."""


class AuthenticationError(ApiError):
    """401: missing, expired or invalid bearer token (or bad credentials)."""


class PermissionDeniedError(ApiError):
    """403: authenticated but not allowed."""


class NotFoundError(ApiError):
    """404."""


class ServerError(ApiError):
    """5xx."""


class ApiConnectionError(ApiError):
    """The request never produced an HTTP response."""


STATUS_ERRORS = {
    400: ValidationError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    422: ValidationError,
}


def error_for_status(status_code: int, payload: Any, reason: str = "") -> ApiError:
    """Map an HTTP status to the matching ApiError subclass."""
    if status_code >= 500:
        error_cls = ServerError
    else:
        error_cls = STATUS_ERRORS.get(status_code, ApiError)

    message = f"HTTP {status_code}"
    if reason:
        message = f"{message} {reason}"
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        message = f"{message}: {payload['message']}"
    return error_cls(message, status_code=status_code, payload=payload)
