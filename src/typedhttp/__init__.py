"""Typed HTTP requests and responses on top of httpx."""

from .bodies import Encodable, FormFields, FormPart, FormParts, RawContent, RawStream, as_body
from .client import HttpService
from .encodings import EncodedContent, JsonDecoder, JsonEncoder, ResponseDecoder, ResponseEncoder
from .exceptions import (
    HttpError,
    HttpNetworkError,
    HttpServiceError,
    HttpTimeoutError,
    HttpUnsupportedError,
    HttpValidationError,
)
from .options import FORM_URLENCODED, MULTIPART_FORM_DATA, HttpHeader, HttpOptions
from .paths import QueryParameter, QueryParameters, rest_path, rest_path_query
from .results import AsBytes, AsDecoded, AsRaw, AsStream, AsText, as_result
from .streams import ResponseStream
from .tokens import StaticTokenProvider, TokenProvider

__all__ = [
    "AsBytes",
    "AsDecoded",
    "AsRaw",
    "AsStream",
    "AsText",
    "Encodable",
    "EncodedContent",
    "FORM_URLENCODED",
    "FormFields",
    "FormPart",
    "FormParts",
    "HttpError",
    "HttpHeader",
    "HttpNetworkError",
    "HttpOptions",
    "HttpService",
    "HttpServiceError",
    "HttpTimeoutError",
    "HttpUnsupportedError",
    "HttpValidationError",
    "JsonDecoder",
    "JsonEncoder",
    "MULTIPART_FORM_DATA",
    "QueryParameter",
    "QueryParameters",
    "RawContent",
    "RawStream",
    "ResponseDecoder",
    "ResponseEncoder",
    "ResponseStream",
    "StaticTokenProvider",
    "TokenProvider",
    "as_body",
    "as_result",
    "rest_path",
    "rest_path_query",
]
