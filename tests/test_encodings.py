from __future__ import annotations

import asyncio
import io

import httpx
import pytest
from pydantic import BaseModel, ValidationError

from typedhttp.bodies import Encodable, FormFields, FormPart, FormParts, RawContent, RawStream, as_body
from typedhttp.encodings import JsonDecoder, JsonEncoder, ResponseDecoder, ResponseEncoder
from typedhttp.options import FORM_URLENCODED
from typedhttp.results import AsBytes, AsDecoded, AsRaw, AsStream, AsText, as_result
from typedhttp.streams import ResponseStream


class Person(BaseModel):
    first_name: str
    nickname: str | None = None


def test_json_encoder_leaves_out_none_fields() -> None:
    encoded = JsonEncoder().encode(Person(first_name="Ada"))
    assert encoded.payload == b'{"first_name":"Ada"}'
    assert encoded.content_type == "application/json"


def test_json_encoder_camel_case() -> None:
    encoded = JsonEncoder(camel_case=True).encode([Person(first_name="Ada", nickname="Countess")])
    assert encoded.payload == b'[{"firstName":"Ada","nickname":"Countess"}]'


def test_codecs_satisfy_protocols() -> None:
    assert isinstance(JsonEncoder(), ResponseEncoder)
    assert isinstance(JsonDecoder(), ResponseDecoder)


def test_json_decoder_sync_validates_model() -> None:
    response = httpx.Response(200, json={"first_name": "Ada"})
    person = JsonDecoder().decode_sync(response, Person)
    assert person == Person(first_name="Ada")


def test_json_decoder_async_validates_list() -> None:
    response = httpx.Response(200, json=[{"first_name": "Ada"}, {"first_name": "Grace"}])
    people = asyncio.run(JsonDecoder().decode(response, list[Person]))
    assert [person.first_name for person in people] == ["Ada", "Grace"]


def test_json_decoder_without_target_returns_plain_data() -> None:
    response = httpx.Response(200, json={"a": [1, 2]})
    assert JsonDecoder().decode_sync(response) == {"a": [1, 2]}


def test_json_decoder_raises_validation_error() -> None:
    response = httpx.Response(200, json={"nickname": "x"})
    with pytest.raises(ValidationError):
        JsonDecoder().decode_sync(response, Person)


def test_as_body_picks_form_fields_only_for_form_media_type() -> None:
    assert as_body({"a": 1}, FORM_URLENCODED) == FormFields({"a": 1})
    assert as_body({"a": 1}, "Application/X-WWW-Form-Urlencoded") == FormFields({"a": 1})
    assert as_body({"a": 1}) == Encodable({"a": 1})
    assert as_body({"a": 1}, "application/json") == Encodable({"a": 1})


def test_as_body_shapes() -> None:
    part = FormPart("file", b"data", filename="a.txt")
    assert as_body(part) is part
    assert as_body([part, part]) == FormParts((part, part))
    assert as_body(b"raw") == RawContent(b"raw")
    assert as_body(bytearray(b"raw")) == RawContent(b"raw")

    stream = io.BytesIO(b"data")
    assert as_body(stream) == RawStream(stream)
    chunks = iter([b"ab", b"cd"])
    assert as_body(chunks) == RawStream(chunks)
    generated = (row for row in [b"x"])
    assert as_body(generated, "text/csv") == RawStream(generated)
    assert as_body((b"ab", b"cd")) == Encodable((b"ab", b"cd"))
    assert as_body("text") == Encodable("text")
    assert as_body([1, 2]) == Encodable([1, 2])
    assert as_body([]) == Encodable([])


def test_raw_stream_chunks_file_objects() -> None:
    async def collect() -> bytes:
        chunks = [chunk async for chunk in RawStream(io.BytesIO(b"a" * 70000)).aiter_chunks()]
        assert len(chunks) == 2
        return b"".join(chunks)

    assert asyncio.run(collect()) == b"a" * 70000


def test_raw_stream_chunks_iterables() -> None:
    async def generate():
        yield b"x"
        yield b"y"

    async def collect(stream) -> list[bytes]:
        return [chunk async for chunk in RawStream(stream).aiter_chunks()]

    assert asyncio.run(collect(generate())) == [b"x", b"y"]
    assert asyncio.run(collect([b"a", b"b"])) == [b"a", b"b"]


def test_as_result_shorthands() -> None:
    assert as_result(None) is None
    assert as_result(httpx.Response) == AsRaw()
    assert as_result(str) == AsText()
    assert as_result(bytes) == AsBytes()
    assert as_result(ResponseStream) == AsStream()
    assert as_result(Person) == AsDecoded(Person)
    assert as_result(AsDecoded(Person, default=[])) == AsDecoded(Person, default=[])


def test_result_empty_values() -> None:
    assert AsText().empty() == ""
    assert AsBytes().empty() == b""
    assert AsDecoded(Person).empty() is None
    assert AsDecoded(list[Person], default=[]).empty() == []
    assert AsStream().empty().is_closed
