"""JSON helpers for header maps and response envelopes."""

from __future__ import annotations

import json
from typing import Any

from .errors import ParseError
from .response import Response
from .types import HeadersMap

HEADER_KEY = "Header"


def is_valid_json(text: str) -> bool:
    try:
        json.loads(text)
    except (TypeError, ValueError):
        return False
    return True


def parse_headers_json(text: str) -> HeadersMap:
    """Read request headers from ``{"Header": {"Name": "value", ...}}``."""
    if not text:
        raise ParseError("Header JSON is empty")
    try:
        document: Any = json.loads(text)
    except ValueError as exc:
        raise ParseError(f"Header JSON parse error: {exc}", context=text) from exc

    if not isinstance(document, dict) or HEADER_KEY not in document:
        raise ParseError(f'Header JSON does not have a member called "{HEADER_KEY}"', context=text)

    header = document[HEADER_KEY]
    if not isinstance(header, dict):
        raise ParseError(f'"{HEADER_KEY}" must be a JSON object', context=text)

    headers: HeadersMap = {}
    for key, value in header.items():
        if not isinstance(value, str):
            raise ParseError(f'Header "{key}" must have a string value', context=text)
        headers[key] = value
    return headers


def response_to_json(response: Response) -> str:
    """Serialize ``{"Status-Code": n, "Header": {...}, "Body": "..."}`` compactly."""
    payload = {
        "Status-Code": response.status_code,
        HEADER_KEY: dict(response.headers),
        "Body": response.body,
    }
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def response_to_envelope(response: Response, *, escape_body: bool = True) -> str:
    """Serialize ``{"Status-Code": n, "Headers": [{...}], "Body": ...}``.

    With ``escape_body=False`` the body is spliced in verbatim, which is only
    valid JSON when the body itself is a JSON document.
    """
    status = json.dumps(response.status_code)
    headers = json.dumps([dict(response.headers)], ensure_ascii=False, separators=(",", ":"))
    body = json.dumps(response.body, ensure_ascii=False) if escape_body else response.body
    return f'{{"Status-Code":{status}, "Headers":{headers},"Body":{body}}}'


__all__ = [
    "HEADER_KEY",
    "is_valid_json",
    "parse_headers_json",
    "response_to_envelope",
    "response_to_json",
]
