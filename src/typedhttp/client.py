"""Asynchronous HTTP service with typed request bodies and responses."""

from __future__ import annotations

import logging
import os
import random
from typing import Any, Iterable, Mapping
from urllib.parse import urlencode
from xml.etree import ElementTree

import httpx

from .bodies import Body, FormFields, FormPart, FormParts, RawContent, RawStream, as_body
from .encodings import JsonDecoder, JsonEncoder
from .exceptions import (
    HttpNetworkError,
    HttpServiceError,
    HttpTimeoutError,
    HttpUnsupportedError,
    HttpValidationError,
)
from .options import FORM_URLENCODED, MULTIPART_FORM_DATA, HttpOptions
from .paths import QueryParameters
from .results import AsBytes, AsRaw, AsStream, AsText, ResultRequest, as_result
from .security import sanitize_headers, validate_base_url
from .streams import ResponseStream

logger = logging.getLogger(__name__)

_MISSING: Any = object()

REDIRECT_STATUS_CODES = frozenset({301, 302, 303})
KEEP_METHOD_REDIRECT_STATUS_CODES = frozenset({307, 308})
XML_MEDIA_TYPES = frozenset({"application/xml", "text/xml"})
TEXT_MEDIA_TYPE = "text/plain"


def _media_type(response: httpx.Response) -> str:
    return response.headers.get("content-type", "").split(";", 1)[0].strip().lower()


def _is_json(media_type: str) -> bool:
    return media_type == "application/json" or media_type.endswith("+json")


def _multipart_boundary() -> str:
    return f"------------------------{random.getrandbits(32):08x}{random.getrandbits(32):08x}"


def _with_query(url: str, query: QueryParameters | Any | None) -> str:
    if query is None:
        return url
    if not isinstance(query, QueryParameters):
        query = QueryParameters.from_value(query)
    querystring = str(query)
    if not querystring:
        return url
    if "?" in url:
        return f"{url}&{querystring[1:]}"
    return f"{url}{querystring}"


def _dump_headers(response: httpx.Response) -> str:
    lines = ["Request Headers"]
    lines.extend(f"{key}: {value}" for key, value in sanitize_headers(response.request.headers.multi_items()))
    lines.append("Response Headers")
    lines.extend(f"{key}: {value}" for key, value in sanitize_headers(response.headers.multi_items()))
    return "\n".join(lines)


async def _read_error_body(response: httpx.Response) -> str:
    """Return the response text, or an empty string when it cannot be read."""
    try:
        await response.aread()
        return response.text
    except (httpx.HTTPError, httpx.StreamError):
        return ""
    finally:
        await response.aclose()


async def _buffer(response: httpx.Response) -> httpx.Response:
    try:
        await response.aread()
    finally:
        await response.aclose()
    return response


def _form_files(parts: Iterable[FormPart]) -> list[tuple[str, tuple[str | None, Any, str | None]]]:
    return [(part.name, (part.filename, part.content, part.content_type)) for part in parts]


class HttpService:
    """Send requests and hand back responses in the shape the caller asks for.

    Every verb accepts a ``result`` describing how the body is returned (see
    ``typedhttp.results``); plain types work as shorthands, so ``result=str``
    means ``AsText()`` and ``result=MyModel`` means ``AsDecoded(MyModel)``.
    Without a result the status is checked and the body discarded.
    """

    default_timeout = 30.0
    user_agent = "typedhttp/0.1.0"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        headers: Mapping[str, str] | None = None,
        httpx_client: httpx.AsyncClient | None = None,
        allow_http: bool = True,
        base_url_env_var: str = "TYPEDHTTP_BASE_URL",
        timeout_env_var: str = "TYPEDHTTP_TIMEOUT",
    ) -> None:
        self.base_url = base_url or os.getenv(base_url_env_var) or ""
        if self.base_url:
            try:
                validate_base_url(self.base_url, allow_http=allow_http)
            except ValueError as exc:
                raise HttpValidationError(str(exc), cause=exc) from exc
        if timeout is None:
            env_timeout = os.getenv(timeout_env_var)
            try:
                timeout = float(env_timeout) if env_timeout else self.default_timeout
            except ValueError as exc:
                raise HttpValidationError(f"{timeout_env_var} must be a number", cause=exc) from exc
        if timeout <= 0:
            raise HttpValidationError("timeout must be greater than 0")

        self._default_headers: list[tuple[str, str]] = [("User-Agent", self.user_agent)]
        if headers:
            self._default_headers.extend((str(key), str(value)) for key, value in headers.items())

        self._owns_client = httpx_client is None
        self._httpx = httpx_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            follow_redirects=False,
            trust_env=False,
        )

    @property
    def timeout(self) -> httpx.Timeout:
        return self._httpx.timeout

    @timeout.setter
    def timeout(self, value: float | httpx.Timeout) -> None:
        self._httpx.timeout = value

    async def __aenter__(self) -> "HttpService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._httpx.aclose()

    async def create_request(
        self,
        url: str,
        method: str = "GET",
        body: Any = _MISSING,
        *,
        options: HttpOptions | None = None,
        query: QueryParameters | Any | None = None,
    ) -> httpx.Request:
        """Build a request without sending it.

        Leaving out ``body`` builds a request without content; passing
        ``None`` explicitly is an error.
        """
        options = options or HttpOptions()
        method = method.upper()
        if body is None:
            raise HttpValidationError(f"Must provide a body for '{method}'")

        headers = list(self._default_headers)
        if options.token_provider is not None:
            scheme, token = await options.token_provider.get_token()
            if token is not None:
                headers.append(("Authorization", f"{scheme or 'Bearer'} {token}"))
        for key, value in options.headers or ():
            headers.append((key, value))
        if options.expect_continue:
            headers.append(("Expect", "100-continue"))

        url = _with_query(url, query)
        if body is _MISSING:
            return self._httpx.build_request(method, url, headers=headers)
        return self._build_with_body(method, url, headers, as_body(body, options.media_type), options)

    def _build_with_body(
        self,
        method: str,
        url: str,
        headers: list[tuple[str, str]],
        body: Body,
        options: HttpOptions,
    ) -> httpx.Request:
        media_type = options.media_type.lower() if options.media_type else None
        if media_type == FORM_URLENCODED and not isinstance(body, FormFields):
            raise HttpUnsupportedError("Body type not supported for x-www-form-urlencoded requests")

        if isinstance(body, FormFields):
            if media_type not in (None, FORM_URLENCODED):
                raise HttpUnsupportedError(f"Form fields can not be sent as '{options.media_type}'")
            payload = urlencode([(str(key), "" if value is None else str(value)) for key, value in body.fields.items()])
            headers.append(("Content-Type", FORM_URLENCODED))
            return self._httpx.build_request(method, url, headers=headers, content=payload.encode("ascii"))

        if isinstance(body, (FormPart, FormParts)):
            parts = (body,) if isinstance(body, FormPart) else body.parts
            headers.append(("Content-Type", f"{MULTIPART_FORM_DATA}; boundary={_multipart_boundary()}"))
            return self._httpx.build_request(method, url, headers=headers, files=_form_files(parts))

        if isinstance(body, RawContent):
            content_type = body.content_type or options.media_type
            if content_type:
                headers.append(("Content-Type", content_type))
            return self._httpx.build_request(method, url, headers=headers, content=body.content)

        if isinstance(body, RawStream):
            if options.media_type:
                headers.append(("Content-Type", options.media_type))
            return self._httpx.build_request(method, url, headers=headers, content=body.aiter_chunks())

        encoder = options.encoder or JsonEncoder()
        encoded = encoder.encode(body.value)
        headers.append(("Content-Type", encoded.content_type))
        return self._httpx.build_request(method, url, headers=headers, content=encoded.payload)

    async def _dispatch(self, request: httpx.Request) -> httpx.Response:
        logger.debug("%s %s", request.method, request.url)
        try:
            return await self._httpx.send(request, stream=True, follow_redirects=False)
        except httpx.TimeoutException as exc:
            raise HttpTimeoutError(f"Request to '{request.url}' timed out", cause=exc) from exc
        except httpx.TransportError as exc:
            raise HttpNetworkError(f"Error sending request to '{request.url}'", cause=exc) from exc

    async def _follow_redirects(self, response: httpx.Response, options: HttpOptions) -> httpx.Response:
        hops = 0
        while True:
            status_code = response.status_code
            if status_code in KEEP_METHOD_REDIRECT_STATUS_CODES:
                await response.aclose()
                raise HttpUnsupportedError(
                    f"{status_code} redirect is not implemented",
                    status_code=status_code,
                    headers=response.headers,
                )
            if status_code not in REDIRECT_STATUS_CODES:
                return response

            location = response.headers.get("location")
            if not location:
                return response
            if hops >= options.max_redirects:
                logger.warning(
                    "Stopped following redirects of '%s' after %d hops",
                    response.request.url,
                    hops,
                )
                return response

            if options.url_processor is not None:
                location = options.url_processor(location)
            target = response.request.url.join(location)
            await response.aclose()
            logger.debug("Following %d redirect to %s", status_code, target)
            response = await self._dispatch(await self.create_request(str(target), "GET", options=options))
            hops += 1

    @staticmethod
    async def _check_response(response: httpx.Response) -> None:
        if 200 <= response.status_code <= 399:
            return
        body = await _read_error_body(response)
        message = (
            f"Error sending request to '{response.request.url}' -> status {response.status_code}\n"
            f"{_dump_headers(response)}"
        )
        if body:
            message = f"{message}\n{body}"
        raise HttpServiceError(response, message, body=body or None)

    async def _read_response(self, response: httpx.Response, result: ResultRequest, options: HttpOptions) -> Any:
        if isinstance(result, AsRaw):
            return response

        if response.headers.get("content-length") == "0":
            await response.aclose()
            return result.empty()

        if isinstance(result, AsStream):
            return ResponseStream(response)
        if isinstance(result, AsText):
            return (await _buffer(response)).text
        if isinstance(result, AsBytes):
            return (await _buffer(response)).content

        media_type = _media_type(response)
        if _is_json(media_type):
            decoder = options.decoder or JsonDecoder()
            try:
                return await decoder.decode(response, result.target)
            except Exception as exc:
                raise HttpServiceError(
                    response,
                    f"Error decoding response of '{response.request.url}'",
                    cause=exc,
                ) from exc
            finally:
                await response.aclose()

        if media_type in XML_MEDIA_TYPES:
            try:
                return ElementTree.ElementTree(ElementTree.fromstring(await response.aread()))
            except ElementTree.ParseError as exc:
                raise HttpServiceError(
                    response,
                    f"Error decoding response of '{response.request.url}'",
                    cause=exc,
                ) from exc
            finally:
                await response.aclose()

        if media_type == TEXT_MEDIA_TYPE:
            return (await _buffer(response)).text

        return ResponseStream(response)

    async def _handle_response(
        self,
        response: httpx.Response,
        result: ResultRequest | None,
        options: HttpOptions,
    ) -> Any:
        if options.follow_redirects:
            response = await self._follow_redirects(response, options)

        if not isinstance(result, AsRaw):
            await self._check_response(response)

        if result is None:
            await _buffer(response)
            return None
        return await self._read_response(response, result, options)

    async def send(
        self,
        request: httpx.Request,
        *,
        result: Any = None,
        options: HttpOptions | None = None,
    ) -> Any:
        """Send a prebuilt request."""
        options = options or HttpOptions()
        result_request = as_result(result)
        response = await self._dispatch(request)
        return await self._handle_response(response, result_request, options)

    async def request(
        self,
        method: str,
        url: str,
        body: Any = _MISSING,
        *,
        result: Any = None,
        options: HttpOptions | None = None,
        query: QueryParameters | Any | None = None,
    ) -> Any:
        """Send a request using any HTTP method."""
        options = options or HttpOptions()
        request = await self.create_request(url, method, body, options=options, query=query)
        return await self.send(request, result=result, options=options)

    async def get(
        self,
        url: str,
        *,
        result: Any = None,
        options: HttpOptions | None = None,
        query: QueryParameters | Any | None = None,
    ) -> Any:
        return await self.request("GET", url, result=result, options=options, query=query)

    async def delete(
        self,
        url: str,
        *,
        result: Any = None,
        options: HttpOptions | None = None,
        query: QueryParameters | Any | None = None,
    ) -> Any:
        return await self.request("DELETE", url, result=result, options=options, query=query)

    async def post(
        self,
        url: str,
        body: Any = _MISSING,
        *,
        result: Any = None,
        options: HttpOptions | None = None,
        query: QueryParameters | Any | None = None,
    ) -> Any:
        return await self.request("POST", url, body, result=result, options=options, query=query)

    async def put(
        self,
        url: str,
        body: Any,
        *,
        result: Any = None,
        options: HttpOptions | None = None,
        query: QueryParameters | Any | None = None,
    ) -> Any:
        return await self.request("PUT", url, body, result=result, options=options, query=query)

    async def patch(
        self,
        url: str,
        body: Any,
        *,
        result: Any = None,
        options: HttpOptions | None = None,
        query: QueryParameters | Any | None = None,
    ) -> Any:
        return await self.request("PATCH", url, body, result=result, options=options, query=query)
