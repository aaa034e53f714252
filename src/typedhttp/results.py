"""How a response body is handed back to the caller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import httpx

from .streams import ResponseStream


@dataclass(frozen=True)
class AsRaw:
    """The ``httpx.Response`` itself. No status check, nothing is read."""


@dataclass(frozen=True)
class AsText:
    def empty(self) -> str:
        return ""


@dataclass(frozen=True)
class AsBytes:
    def empty(self) -> bytes:
        return b""


@dataclass(frozen=True)
class AsStream:
    """A ``ResponseStream`` the caller reads and closes."""

    def empty(self) -> ResponseStream:
        return ResponseStream.empty()


@dataclass(frozen=True)
class AsDecoded:
    """Decode the body according to its content type.

    JSON is validated into ``target``, XML becomes an ``ElementTree``, plain
    text a ``str``. Other content types are returned as a ``ResponseStream``.
    """

    target: Any = Any
    default: Any = None

    def empty(self) -> Any:
        return self.default


ResultRequest = Union[AsRaw, AsText, AsBytes, AsStream, AsDecoded]


def as_result(result: Any) -> ResultRequest | None:
    """Resolve a result request or a type shorthand.

    ``None`` means the body is not wanted.
    """
    if result is None or isinstance(result, (AsRaw, AsText, AsBytes, AsStream, AsDecoded)):
        return result
    if result is httpx.Response:
        return AsRaw()
    if result is str:
        return AsText()
    if result is bytes:
        return AsBytes()
    if result is ResponseStream:
        return AsStream()
    return AsDecoded(result)
