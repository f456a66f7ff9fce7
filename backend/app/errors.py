"""Domain errors and their HTTP status codes.

Routes never build error responses by hand: they raise one of these and the
handlers registered in ``app.main`` turn it into ``{"detail": ...}``.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """A required field is missing or has an invalid value."""

    status_code = 400


class NotFoundError(AppError):
    """An integration, session or proxy backend id is unknown."""

    status_code = 404


class ConflictError(AppError):
    """A session was modified since the caller last read it."""

    status_code = 409


class InferenceError(AppError):
    """An upstream inference call failed or returned an unexpected body.

    ``upstream_status`` is 0 when no HTTP response was received at all.
    """

    status_code = 502

    def __init__(
        self,
        message: str,
        upstream_status: int = 0,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body
