"""HTTP transport built on top of httpx."""

from __future__ import annotations

import socket
import ssl
import time
from typing import Iterator

import httpx

from ..engine import engine
from ..errors import CallbackAbort, TransportCode, TransportError
from ..logger import BoundLogger, create_logger
from .base import TransferOptions, TransferSink, UploadReader

DEFAULT_CHUNK_SIZE = 16384

_DNS_HINTS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated",
)


class HttpTransport:
    """Session handle performing one blocking request per :meth:`perform`.

    Response data is pushed into ``options.sink`` as raw header lines followed
    by body chunks of at most ``chunk_size`` bytes. The request body, when
    ``options.upload`` is set, is pulled from the reader in chunks of the
    same size.
    """

    def __init__(
        self,
        *,
        transport: httpx.BaseTransport | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        logger: BoundLogger | None = None,
    ) -> None:
        self.options = TransferOptions()
        self.chunk_size = chunk_size
        self.last_error: str = ""
        self._transport = transport
        self._logger = (logger or create_logger()).child("http")
        self._client: httpx.Client | None = None
        self._client_key: tuple | None = None
        self._response_code = 0
        self._referer: str | None = None

    def reset(self) -> None:
        self.options = TransferOptions()
        self.last_error = ""
        self._response_code = 0
        if self._client is not None:
            self._client.cookies.clear()

    def response_code(self) -> int:
        return self._response_code

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._client_key = None

    def perform(self) -> TransportCode:
        opts = self.options
        self._response_code = 0
        self._referer = None
        try:
            self._transfer(opts)
        except TransportError as exc:
            return self._fail(exc.code, exc)
        except httpx.InvalidURL as exc:
            return self._fail(TransportCode.URL_MALFORMAT, exc)
        except (httpx.HTTPError, httpx.StreamError) as exc:
            return self._fail(_translate(exc), exc)
        except ValueError as exc:
            # Header lines that cannot be put on the wire, including UnicodeError
            return self._fail(TransportCode.SEND_ERROR, exc)
        return TransportCode.OK

    def _transfer(self, opts: TransferOptions) -> None:
        if opts.use_ssl and not opts.url.lower().startswith("https://"):
            raise TransportError(TransportCode.USE_SSL_FAILED, f"TLS required for {opts.url}")

        deadline = time.monotonic() + opts.timeout if opts.timeout > 0 else None
        client = self._client_for(opts)
        request = client.build_request(
            opts.method,
            opts.url,
            headers=self._build_headers(opts),
            content=self._build_content(opts, deadline),
            timeout=httpx.Timeout(_remaining(deadline, opts.timeout)),
        )
        self._logger.debug("HTTP %s %s", opts.method, opts.url)
        response = client.send(request, stream=True, follow_redirects=opts.follow_location)
        try:
            sink = opts.sink
            received = 0
            _check_deadline(deadline, opts.timeout)
            for hop in (*response.history, response):
                self._emit_headers(hop, sink)
            if not opts.no_body:
                # Network reads are sliced here so the deadline is checked per read
                for data in response.iter_bytes():
                    _check_deadline(deadline, opts.timeout)
                    for start in range(0, len(data), self.chunk_size):
                        chunk = data[start : start + self.chunk_size]
                        received += len(chunk)
                        if sink is not None and sink.on_body_chunk(chunk) != len(chunk):
                            raise CallbackAbort(TransportCode.WRITE_ERROR)
        finally:
            response.close()
        self._response_code = response.status_code
        self._logger.debug(
            "HTTP <- %s status=%s bytes=%d",
            opts.url,
            response.status_code,
            received,
        )

    def _fail(self, code: TransportCode, exc: Exception) -> TransportCode:
        self.last_error = str(exc) or code.description
        self._logger.debug("HTTP %s failed code=%d: %s", self.options.url, int(code), self.last_error)
        return code

    def _build_headers(self, opts: TransferOptions) -> list[tuple[bytes, bytes]]:
        """Split raw ``Name: value`` lines into UTF-8 encoded header pairs."""
        headers: list[tuple[str, str]] = []
        for line in opts.headers:
            name, sep, value = line.partition(":")
            if not sep:
                self._logger.debug("Skipping malformed header line %r", line)
                continue
            headers.append((name.strip(), value.strip()))

        names = {name.lower() for name, _ in headers}
        if opts.user_agent and "user-agent" not in names:
            headers.insert(0, ("User-Agent", opts.user_agent))
        if opts.upload is not None and opts.upload_size is not None and "content-length" not in names:
            headers.append(("Content-Length", str(opts.upload_size)))
        return [(name.encode("utf-8"), value.encode("utf-8")) for name, value in headers]

    def _build_content(self, opts: TransferOptions, deadline: float | None) -> bytes | Iterator[bytes] | None:
        if opts.upload is not None:
            return self._iter_upload(opts.upload, opts.upload_size, deadline, opts.timeout)
        return opts.body

    def _iter_upload(
        self,
        reader: UploadReader,
        size: int | None,
        deadline: float | None = None,
        timeout: int = 0,
    ) -> Iterator[bytes]:
        sent = 0
        while size is None or sent < size:
            _check_deadline(deadline, timeout)
            capacity = self.chunk_size if size is None else min(self.chunk_size, size - sent)
            buffer = bytearray(capacity)
            count = reader.on_read_chunk(buffer)
            if count == 0:
                if size is not None:
                    raise CallbackAbort(
                        TransportCode.READ_ERROR,
                        f"Upload ended after {sent} of {size} bytes",
                    )
                return
            sent += count
            yield bytes(buffer[:count])

    def _emit_headers(self, response: httpx.Response, sink: TransferSink | None) -> None:
        if sink is None:
            return
        lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}\r\n".encode("latin-1")]
        lines.extend(name + b": " + value + b"\r\n" for name, value in response.headers.raw)
        lines.append(b"\r\n")
        for line in lines:
            if sink.on_header_line(line) != len(line):
                raise CallbackAbort(TransportCode.WRITE_ERROR)

    def _client_for(self, opts: TransferOptions) -> httpx.Client:
        hooks = {"request": [self._apply_referer]}
        if self._transport is not None:
            if self._client is None:
                self._client = httpx.Client(transport=self._transport, event_hooks=hooks)
            return self._client

        key = (
            opts.use_ssl,
            opts.verify_peer,
            opts.verify_host,
            opts.ca_info,
            opts.ssl_cert,
            opts.ssl_key,
            opts.key_password,
        )
        if self._client is None or key != self._client_key:
            context = self._ssl_context(opts)
            self.close()
            self._client = httpx.Client(verify=context, event_hooks=hooks)
            self._client_key = key
        return self._client

    def _ssl_context(self, opts: TransferOptions) -> ssl.SSLContext:
        if not opts.use_ssl:
            return engine.default_ssl_context()

        try:
            context = ssl.create_default_context(cafile=opts.ca_info or engine.ca_bundle)
        except (OSError, ssl.SSLError) as exc:
            raise TransportError(TransportCode.SSL_CACERT_BADFILE, str(exc)) from exc

        if not opts.verify_host or not opts.verify_peer:
            context.check_hostname = False
        if not opts.verify_peer:
            context.verify_mode = ssl.CERT_NONE

        if opts.ssl_cert:
            try:
                context.load_cert_chain(opts.ssl_cert, opts.ssl_key or None, opts.key_password or None)
            except (OSError, ssl.SSLError) as exc:
                raise TransportError(TransportCode.SSL_CERTPROBLEM, str(exc)) from exc
        return context

    def _apply_referer(self, request: httpx.Request) -> None:
        if self.options.auto_referer and self._referer is not None:
            request.headers["Referer"] = self._referer
        self._referer = str(request.url)


def _remaining(deadline: float | None, timeout: int) -> float | None:
    if deadline is None:
        return None
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise TransportError(TransportCode.OPERATION_TIMEDOUT, f"Operation timed out after {timeout} seconds")
    return remaining


def _check_deadline(deadline: float | None, timeout: int) -> None:
    _remaining(deadline, timeout)


def _translate(exc: Exception) -> TransportCode:
    if isinstance(exc, httpx.TimeoutException):
        return TransportCode.OPERATION_TIMEDOUT
    if isinstance(exc, httpx.ProxyError):
        return TransportCode.COULDNT_RESOLVE_PROXY
    if isinstance(exc, httpx.ConnectError):
        return _classify_connect_error(exc)
    if isinstance(exc, httpx.UnsupportedProtocol):
        return TransportCode.UNSUPPORTED_PROTOCOL
    if isinstance(exc, httpx.TooManyRedirects):
        return TransportCode.TOO_MANY_REDIRECTS
    if isinstance(exc, httpx.DecodingError):
        return TransportCode.BAD_CONTENT_ENCODING
    if isinstance(exc, httpx.RemoteProtocolError):
        if "without sending" in str(exc).lower():
            return TransportCode.GOT_NOTHING
        return TransportCode.WEIRD_SERVER_REPLY
    if isinstance(exc, (httpx.WriteError, httpx.LocalProtocolError, httpx.StreamError)):
        return TransportCode.SEND_ERROR
    return TransportCode.RECV_ERROR


def _classify_connect_error(exc: BaseException) -> TransportCode:
    current: BaseException | None = exc
    seen: set[int] = set()
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, ssl.SSLCertVerificationError):
            return TransportCode.PEER_FAILED_VERIFICATION
        if isinstance(current, ssl.SSLError):
            return TransportCode.SSL_CONNECT_ERROR
        if isinstance(current, socket.gaierror):
            return TransportCode.COULDNT_RESOLVE_HOST
        current = current.__cause__ or current.__context__

    message = str(exc).lower()
    if any(hint in message for hint in _DNS_HINTS):
        return TransportCode.COULDNT_RESOLVE_HOST
    if "certificate verify failed" in message:
        return TransportCode.PEER_FAILED_VERIFICATION
    if "ssl" in message or "tls" in message:
        return TransportCode.SSL_CONNECT_ERROR
    return TransportCode.COULDNT_CONNECT


__all__ = ["DEFAULT_CHUNK_SIZE", "HttpTransport"]
