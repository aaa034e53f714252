"""Authentication token providers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenProvider(Protocol):
    """Supplies the credentials for the ``Authorization`` header.

    ``get_token`` returns ``(scheme, token)``. A missing scheme means
    ``Bearer``; a missing token means the request is sent without
    authorization.
    """

    async def get_token(self) -> tuple[str | None, str | None]: ...


class StaticTokenProvider:
    """Provide an already issued token."""

    def __init__(self, token: str | None, scheme: str | None = None) -> None:
        self.token = token
        self.scheme = scheme

    async def get_token(self) -> tuple[str | None, str | None]:
        return self.scheme, self.token

    def update_token(self, token: str | None) -> None:
        self.token = token
