"""Exceptions raised by typedhttp."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    import httpx


class HttpError(Exception):
    """Base exception for all typedhttp failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: object = None,
        headers: Mapping[str, str] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers) if headers is not None else {}
        self.cause = cause

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        return str(self.args[0])


class HttpServiceError(HttpError):
    """Raised for non-success responses and for bodies that fail to decode."""

    def __init__(
        self,
        response: httpx.Response,
        message: str | None = None,
        *,
        body: object = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message or f"{response.status_code}: {response.reason_phrase}",
            status_code=response.status_code,
            body=body,
            headers=response.headers,
            cause=cause,
        )
        self.response = response


class HttpUnsupportedError(HttpError, NotImplementedError):
    """Raised when a request or redirect cannot be handled."""


class HttpValidationError(HttpError, ValueError):
    """Raised when the caller breaks a request contract."""


class HttpNetworkError(HttpError):
    """Raised for transport-level failures like DNS and TCP errors."""


class HttpTimeoutError(HttpError):
    """Raised when a request exceeds the configured timeout."""
