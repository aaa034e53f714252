"""Caller-owned response body streams."""

from __future__ import annotations

from typing import AsyncIterator

import httpx


class ResponseStream:
    """Byte stream over a response whose body has not been read yet.

    The stream owns the response: iterate it, then ``aclose()`` it (or use it
    as an async context manager) to release the connection.
    """

    def __init__(self, response: httpx.Response | None) -> None:
        self.response = response

    @classmethod
    def empty(cls) -> "ResponseStream":
        return cls(None)

    @property
    def content_type(self) -> str | None:
        if self.response is None:
            return None
        return self.response.headers.get("content-type")

    @property
    def is_closed(self) -> bool:
        return self.response is None or self.response.is_closed

    async def aiter_bytes(self, chunk_size: int | None = None) -> AsyncIterator[bytes]:
        if self.response is None:
            return
        async for chunk in self.response.aiter_bytes(chunk_size):
            yield chunk

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.aiter_bytes()

    async def read(self) -> bytes:
        """Read the remaining body and release the response."""
        if self.response is None:
            return b""
        try:
            return await self.response.aread()
        finally:
            await self.response.aclose()

    async def aclose(self) -> None:
        if self.response is not None:
            await self.response.aclose()

    async def __aenter__(self) -> "ResponseStream":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
