"""Common transport abstractions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ..errors import TransportCode


@runtime_checkable
class TransferSink(Protocol):
    """Receives the response while a transfer is running."""

    def on_body_chunk(self, chunk: bytes) -> int: ...

    def on_header_line(self, line: bytes) -> int: ...


@runtime_checkable
class UploadReader(Protocol):
    """Supplies the outgoing request body."""

    def on_read_chunk(self, buffer: bytearray | memoryview) -> int: ...


@dataclass
class TransferOptions:
    """Every option a transport honors for the next :meth:`Transport.perform`.

    ``headers`` holds raw ``"Name: value"`` lines. ``upload_size`` of ``None``
    means the upload length is unknown and the reader is drained until it
    reports end of data.
    """

    url: str = ""
    method: str = "GET"
    headers: list[str] = field(default_factory=list)
    user_agent: str | None = None
    follow_location: bool = False
    auto_referer: bool = False
    no_body: bool = False
    body: bytes | None = None
    upload: UploadReader | None = None
    upload_size: int | None = None
    sink: TransferSink | None = None
    timeout: int = 0
    no_signal: bool = False
    use_ssl: bool = False
    verify_peer: bool = True
    verify_host: bool = True
    ca_info: str | None = None
    ssl_cert: str | None = None
    ssl_key: str | None = None
    key_password: str | None = None


@runtime_checkable
class Transport(Protocol):
    """One session handle: configure ``options``, then ``perform``."""

    options: TransferOptions

    def reset(self) -> None: ...

    def perform(self) -> TransportCode: ...

    def response_code(self) -> int: ...

    def close(self) -> None: ...


__all__ = ["TransferOptions", "TransferSink", "Transport", "UploadReader"]
