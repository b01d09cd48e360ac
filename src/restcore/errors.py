"""Custom exceptions and transport completion codes for the REST client."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class TransportCode(IntEnum):
    """Completion status reported by a transport after one transfer."""

    OK = 0
    UNSUPPORTED_PROTOCOL = 1
    FAILED_INIT = 2
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_PROXY = 5
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    WEIRD_SERVER_REPLY = 8
    WRITE_ERROR = 23
    READ_ERROR = 26
    OPERATION_TIMEDOUT = 28
    SSL_CONNECT_ERROR = 35
    ABORTED_BY_CALLBACK = 42
    TOO_MANY_REDIRECTS = 47
    GOT_NOTHING = 52
    SEND_ERROR = 55
    RECV_ERROR = 56
    SSL_CERTPROBLEM = 58
    PEER_FAILED_VERIFICATION = 60
    BAD_CONTENT_ENCODING = 61
    USE_SSL_FAILED = 64
    SSL_CACERT_BADFILE = 77

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[TransportCode, str] = {
    TransportCode.OK: "No error",
    TransportCode.UNSUPPORTED_PROTOCOL: "Unsupported protocol",
    TransportCode.FAILED_INIT: "Failed initialization",
    TransportCode.URL_MALFORMAT: "URL using bad/illegal format or missing URL",
    TransportCode.COULDNT_RESOLVE_PROXY: "Couldn't resolve proxy name",
    TransportCode.COULDNT_RESOLVE_HOST: "Couldn't resolve host name",
    TransportCode.COULDNT_CONNECT: "Couldn't connect to server",
    TransportCode.WEIRD_SERVER_REPLY: "Weird server reply",
    TransportCode.WRITE_ERROR: "Failed writing received data to disk/application",
    TransportCode.READ_ERROR: "Failed to open/read local data from file/application",
    TransportCode.OPERATION_TIMEDOUT: "Timeout was reached",
    TransportCode.SSL_CONNECT_ERROR: "SSL connect error",
    TransportCode.ABORTED_BY_CALLBACK: "Operation was aborted by an application callback",
    TransportCode.TOO_MANY_REDIRECTS: "Number of redirects hit maximum amount",
    TransportCode.GOT_NOTHING: "Server returned nothing (no headers, no data)",
    TransportCode.SEND_ERROR: "Failed sending data to the peer",
    TransportCode.RECV_ERROR: "Failure when receiving data from the peer",
    TransportCode.SSL_CERTPROBLEM: "Problem with the local SSL certificate",
    TransportCode.PEER_FAILED_VERIFICATION: "SSL peer certificate or SSH remote key was not OK",
    TransportCode.BAD_CONTENT_ENCODING: "Unrecognized or bad HTTP Content or Transfer-Encoding",
    TransportCode.USE_SSL_FAILED: "Requested SSL level failed",
    TransportCode.SSL_CACERT_BADFILE: "Problem with the SSL CA cert (path? access rights?)",
}


class RestClientError(Exception):
    """Base error for all client failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class TransportError(RestClientError):
    """Raised inside a transport when a transfer cannot complete."""

    def __init__(self, code: TransportCode, message: str | None = None, *, context: Any | None = None) -> None:
        super().__init__(message or code.description, context=context)
        self.code = code


class CallbackAbort(TransportError):
    """Raised when a streaming callback refuses or cannot supply data."""


class ParseError(RestClientError):
    """Raised when JSON input for the wrapper layer is malformed."""


__all__ = [
    "CallbackAbort",
    "ParseError",
    "RestClientError",
    "TransportCode",
    "TransportError",
]
