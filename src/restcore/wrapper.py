"""One-shot JSON-in/JSON-out helpers around :class:`RestClient`.

Each helper builds a throwaway client, performs a single request and returns
the serialized response, or an empty string when the input was rejected or
the request failed.
"""

from __future__ import annotations

from typing import Any, Callable

from .client import RestClient
from .errors import ParseError
from .logger import BoundLogger, create_logger
from .settings import TransportFactory
from .serialization import is_valid_json, parse_headers_json, response_to_json
from .types import HeadersMap, RequestResult

JSON_CONTENT_TYPE = "application/json"


def get_json(
    url: str,
    headers_json: str = "",
    *,
    logger: Any | None = None,
    transport_factory: TransportFactory | None = None,
) -> str:
    return _run("GET", url, headers_json, None, logger, transport_factory, lambda client, h: client.get(url, h))


def head_json(
    url: str,
    headers_json: str = "",
    *,
    logger: Any | None = None,
    transport_factory: TransportFactory | None = None,
) -> str:
    return _run("HEAD", url, headers_json, None, logger, transport_factory, lambda client, h: client.head(url, h))


def delete_json(
    url: str,
    headers_json: str = "",
    *,
    logger: Any | None = None,
    transport_factory: TransportFactory | None = None,
) -> str:
    return _run("DELETE", url, headers_json, None, logger, transport_factory, lambda client, h: client.delete(url, h))


def post_json(
    url: str,
    headers_json: str,
    body_json: str,
    *,
    logger: Any | None = None,
    transport_factory: TransportFactory | None = None,
) -> str:
    return _run("POST", url, headers_json, body_json, logger, transport_factory, lambda client, h: client.post(url, h, body_json))


def put_json(
    url: str,
    headers_json: str,
    body_json: str,
    *,
    logger: Any | None = None,
    transport_factory: TransportFactory | None = None,
) -> str:
    return _run("PUT", url, headers_json, body_json, logger, transport_factory, lambda client, h: client.put(url, h, body_json))


def _run(
    method: str,
    url: str,
    headers_json: str,
    body_json: str | None,
    logger: Any | None,
    transport_factory: TransportFactory | None,
    send: Callable[[RestClient, HeadersMap], RequestResult],
) -> str:
    log = create_logger(logger=logger)
    headers = _parse_headers(headers_json, log)
    if headers is None:
        return ""

    if body_json is not None:
        headers.setdefault("Content-Type", JSON_CONTENT_TYPE)
        if not is_valid_json(body_json):
            log.error("%s wrapper: request body is not valid JSON", method)
            return ""

    with RestClient(log, transport_factory=transport_factory) as client:
        client.init_session()
        ok, response = send(client, headers)
    if not ok:
        log.error("%s wrapper: request to %s failed", method, url)
        return ""
    return response_to_json(response)


def _parse_headers(headers_json: str, log: BoundLogger) -> HeadersMap | None:
    if not headers_json:
        return {}
    try:
        return parse_headers_json(headers_json)
    except ParseError as exc:
        log.error("%s", exc)
        return None


__all__ = ["delete_json", "get_json", "head_json", "post_json", "put_json"]
