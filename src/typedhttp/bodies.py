"""Request body variants.

The request builder picks exactly one encoding per request from the variant
it is given:

* ``FormFields`` - ``application/x-www-form-urlencoded``
* ``FormPart`` / ``FormParts`` - ``multipart/form-data``
* ``RawContent`` / ``RawStream`` - sent as-is
* ``Encodable`` - handed to the configured encoder
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Any, AsyncIterable, AsyncIterator, Iterable, Iterator, Mapping, Sequence, Union

from .options import FORM_URLENCODED

STREAM_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class FormFields:
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class FormPart:
    """One section of a multipart body."""

    name: str
    content: bytes | str | IO[bytes]
    filename: str | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class FormParts:
    parts: Sequence[FormPart]


@dataclass(frozen=True)
class RawContent:
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class RawStream:
    """Body read from a binary file object or an (async) iterator of bytes."""

    stream: IO[bytes] | Iterable[bytes] | AsyncIterable[bytes]

    async def aiter_chunks(self) -> AsyncIterator[bytes]:
        stream = self.stream
        if isinstance(stream, AsyncIterable):
            async for chunk in stream:
                yield chunk
            return
        read = getattr(stream, "read", None)
        if callable(read):
            while True:
                chunk = read(STREAM_CHUNK_SIZE)
                if not chunk:
                    return
                yield chunk
        for chunk in stream:
            yield chunk


@dataclass(frozen=True)
class Encodable:
    value: Any


Body = Union[FormFields, FormPart, FormParts, RawContent, RawStream, Encodable]


def _is_form_parts(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and bool(value) and all(isinstance(item, FormPart) for item in value)


def _is_stream(value: Any) -> bool:
    if isinstance(value, (AsyncIterable, Iterator)):
        return True
    return callable(getattr(value, "read", None))


def as_body(value: Any, media_type: str | None = None) -> Body:
    """Wrap a plain value in the body variant matching its shape.

    Mappings only become form fields when ``media_type`` asks for
    form-urlencoding; otherwise they are encoded like any other value.
    """
    if isinstance(value, (FormFields, FormPart, FormParts, RawContent, RawStream, Encodable)):
        return value
    if isinstance(value, Mapping) and (media_type or "").lower() == FORM_URLENCODED:
        return FormFields(value)
    if _is_form_parts(value):
        return FormParts(tuple(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return RawContent(bytes(value))
    if _is_stream(value):
        return RawStream(value)
    return Encodable(value)
