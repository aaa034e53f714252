"""Per-request options for the HTTP service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, NamedTuple, Sequence

from .encodings import ResponseDecoder, ResponseEncoder
from .tokens import TokenProvider

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"
DEFAULT_MAX_REDIRECTS = 10


class HttpHeader(NamedTuple):
    key: str
    value: str


@dataclass(frozen=True)
class HttpOptions:
    """Optional knobs for a single call.

    decoder: decodes JSON responses, ``JsonDecoder`` when unset.
    encoder: encodes plain body values, ``JsonEncoder`` when unset.
    token_provider: source of the ``Authorization`` header, none when unset.
    headers: appended to the request in order, duplicates are kept.
    media_type: content type for form fields and raw streams.
    follow_redirects: reissue 301/302/303 responses as GET requests.
    expect_continue: send ``Expect: 100-continue`` when true.
    url_processor: rewrites redirect locations before they are resolved.
    max_redirects: redirect hops followed before the last response is returned.
    """

    decoder: ResponseDecoder | None = None
    encoder: ResponseEncoder | None = None
    token_provider: TokenProvider | None = None
    headers: Sequence[HttpHeader | tuple[str, str]] | None = None
    media_type: str | None = None
    follow_redirects: bool = False
    expect_continue: bool | None = None
    url_processor: Callable[[str], str] | None = None
    max_redirects: int = DEFAULT_MAX_REDIRECTS
