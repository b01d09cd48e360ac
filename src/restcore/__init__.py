"""Public surface for the restcore HTTP/REST client."""

from .client import USER_AGENT, RestClient
from .engine import TransportEngine, engine
from .errors import (
    CallbackAbort,
    ParseError,
    RestClientError,
    TransportCode,
    TransportError,
)
from .response import FAILED_STATUS, PRESENT, Response
from .serialization import parse_headers_json, response_to_envelope, response_to_json
from .settings import ClientOptions, Settings, SettingsFlag
from .transport import HttpTransport, TransferOptions, Transport
from .types import HeadersMap, RequestResult
from .upload import UploadSource
from .url import normalize_url
from .version import __version__
from .wrapper import delete_json, get_json, head_json, post_json, put_json

__all__ = [
    "__version__",
    "CallbackAbort",
    "ClientOptions",
    "FAILED_STATUS",
    "HeadersMap",
    "HttpTransport",
    "PRESENT",
    "ParseError",
    "RequestResult",
    "Response",
    "RestClient",
    "RestClientError",
    "Settings",
    "SettingsFlag",
    "TransferOptions",
    "Transport",
    "TransportCode",
    "TransportEngine",
    "TransportError",
    "USER_AGENT",
    "UploadSource",
    "delete_json",
    "engine",
    "get_json",
    "head_json",
    "normalize_url",
    "parse_headers_json",
    "post_json",
    "put_json",
    "response_to_envelope",
    "response_to_json",
]
