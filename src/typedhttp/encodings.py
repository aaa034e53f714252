"""Encoders and decoders for request and response bodies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import TypeAdapter
from pydantic.alias_generators import to_camel
from pydantic_core import to_json, to_jsonable_python

JSON_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class EncodedContent:
    """Wire payload produced by an encoder."""

    payload: bytes
    content_type: str


@runtime_checkable
class ResponseEncoder(Protocol):
    """Turns a body value into bytes to send."""

    def encode(self, value: Any) -> EncodedContent: ...


@runtime_checkable
class ResponseDecoder(Protocol):
    """Turns the body of a response into a value of the requested type."""

    async def decode(self, response: httpx.Response, target: Any = Any) -> Any: ...

    def decode_sync(self, response: httpx.Response, target: Any = Any) -> Any: ...


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(key) if isinstance(key, str) else key: _camelize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_camelize(item) for item in value]
    return value


class JsonEncoder:
    """Encode values as JSON.

    ``None`` fields of models and dataclasses are left out and field aliases
    are honoured. With ``camel_case`` every object key is rewritten from
    snake_case to camelCase.
    """

    def __init__(self, *, camel_case: bool = False, exclude_none: bool = True) -> None:
        self.camel_case = camel_case
        self.exclude_none = exclude_none

    def encode(self, value: Any) -> EncodedContent:
        if self.camel_case:
            data = _camelize(to_jsonable_python(value, by_alias=True, exclude_none=self.exclude_none))
            payload = to_json(data)
        else:
            payload = to_json(value, by_alias=True, exclude_none=self.exclude_none)
        return EncodedContent(payload=payload, content_type=JSON_MEDIA_TYPE)


class JsonDecoder:
    """Decode JSON bodies, validating them into the requested type with pydantic."""

    @staticmethod
    def _validate(content: bytes, target: Any) -> Any:
        return TypeAdapter(target).validate_json(content)

    async def decode(self, response: httpx.Response, target: Any = Any) -> Any:
        return self._validate(await response.aread(), target)

    def decode_sync(self, response: httpx.Response, target: Any = Any) -> Any:
        return self._validate(response.read(), target)
