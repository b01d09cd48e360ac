"""Transport implementations exposed to users."""

from .base import TransferOptions, TransferSink, Transport, UploadReader
from .http import DEFAULT_CHUNK_SIZE, HttpTransport

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "HttpTransport",
    "TransferOptions",
    "TransferSink",
    "Transport",
    "UploadReader",
]
