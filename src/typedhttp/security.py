"""Header redaction and URL validation helpers."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import urlparse


SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
}


def sanitize_headers(headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Return header pairs with sensitive values redacted for logging and error messages."""
    redacted: list[tuple[str, str]] = []
    for key, value in headers:
        if key.lower() in SENSITIVE_HEADERS:
            redacted.append((key, "[REDACTED]"))
        else:
            redacted.append((key, value))
    return redacted


def validate_base_url(url: str, *, allow_http: bool = True) -> None:
    """Validate a base URL before it is handed to the transport."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("base_url must include scheme and host")
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"Unsupported base_url scheme: {parsed.scheme}")
    if parsed.scheme == "http" and not allow_http:
        allowed = {"localhost", "127.0.0.1", "::1"}
        host = (parsed.hostname or "").lower()
        if host not in allowed:
            raise ValueError("Non-HTTPS base_url is not allowed without allow_http=True")
    if "\x00" in url:
        raise ValueError("Invalid base_url")
