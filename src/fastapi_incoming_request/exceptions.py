"""RequestException hierarchy for shape errors and controlled stage aborts."""

from __future__ import annotations


class RequestException(Exception):
    """Base for all incoming-request exceptions."""


class ShapeViolation(RequestException, TypeError):
    """A bulk setter received a value that does not have the required shape.

    ``path`` locates the offending entry in bracket notation (``a[b]``);
    it is empty when the value itself is not a mapping.
    """

    def __init__(self, detail: str, *, path: str = "") -> None:
        message = f"{detail} at {path!r}" if path else detail
        super().__init__(message)
        self.detail = detail
        self.path = path


class StageAbort(RequestException):
    """Controlled abort with HTTP status code and detail."""

    def __init__(self, detail: str, *, status_code: int = 400) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class AuthenticationFailed(StageAbort):
    """Authentication check failed (401)."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(detail, status_code=401)


class RouteNotFound(StageAbort):
    """No route pattern matched the request path (404)."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(detail, status_code=404)


class MalformedBody(StageAbort):
    """Request body could not be decoded (400)."""

    def __init__(self, detail: str = "Malformed request body") -> None:
        super().__init__(detail, status_code=400)


class StageInternalError(RequestException):
    """Pipeline-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
