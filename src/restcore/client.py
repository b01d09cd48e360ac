"""REST client driving one transport session per instance."""

from __future__ import annotations

from typing import Any, Mapping

from .engine import engine
from .errors import RestClientError, TransportCode
from .logger import BoundLogger, LogLevel, create_logger
from .response import Response
from .settings import ClientOptions, Settings, TransportFactory
from .transport import HttpTransport, Transport
from .types import ByteBuffer, RequestResult
from .upload import UploadSource
from .url import normalize_url
from .version import __version__

USER_AGENT = f"restcore-agent/{__version__}"

LOG_ERROR_EMPTY_HOST_MSG = "[RestClient][Error] Empty hostname."
LOG_WARNING_OBJECT_NOT_CLEANED = (
    "[RestClient][Warning] Object was freed before calling RestClient.cleanup_session(). "
    "The API session was cleaned though."
)
LOG_ERROR_ALREADY_INIT_MSG = (
    "[RestClient][Error] Session is already initialized ! Use cleanup_session() to clean the present one."
)
LOG_ERROR_NOT_INIT_MSG = "[RestClient][Error] Session is not initialized ! Use init_session() before."
LOG_ERROR_REST_FAILURE_FORMAT = "[RestClient][Error] Unable to perform a REST request from '%s' (Error = %d | %s)"
LOG_ERROR_SESSION_FAILURE_FORMAT = "[RestClient][Error] Unable to create a transport session: %s"


def _default_transport_factory(logger: BoundLogger) -> Transport:
    return HttpTransport(logger=logger)


class RestClient:
    """HTTP/REST client owning at most one live transport session.

    Call :meth:`init_session` before issuing requests and
    :meth:`cleanup_session` when done. Every request method returns a
    :class:`RequestResult`; ``ok`` is False for misuse and transport failures,
    while any HTTP status (including 4xx/5xx) counts as success.

    A single instance is not reentrant: drive it from one thread at a time.
    """

    _certificate_file: str = ""

    def __init__(
        self,
        logger: Any | None = None,
        *,
        log_level: LogLevel = "info",
        timeout: int = 0,
        no_signal: bool = False,
        ssl_cert_file: str = "",
        ssl_key_file: str = "",
        ssl_key_password: str = "",
        transport_factory: TransportFactory | None = None,
    ) -> None:
        options = ClientOptions(
            logger=logger,
            log_level=log_level,
            timeout=timeout,
            no_signal=no_signal,
            ssl_cert_file=ssl_cert_file,
            ssl_key_file=ssl_key_file,
            ssl_key_password=ssl_key_password,
            transport_factory=transport_factory,
        )
        self._logger = create_logger(logger=options.logger, level=options.log_level)
        self._transport_factory = options.transport_factory or _default_transport_factory
        self.timeout = options.timeout
        self.no_signal = options.no_signal
        self.https = False
        self.ssl_cert_file = options.ssl_cert_file
        self.ssl_key_file = options.ssl_key_file
        self.ssl_key_password = options.ssl_key_password
        self._settings = Settings.all()
        self._url = ""
        self._session: Transport | None = None
        self._header_list: list[str] = []
        self._closed = False
        engine.acquire()

    # Configuration

    @property
    def url(self) -> str:
        return self._url

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def session(self) -> Transport | None:
        return self._session

    @classmethod
    def get_certificate_file(cls) -> str:
        return RestClient._certificate_file

    @classmethod
    def set_certificate_file(cls, path: str) -> None:
        """Set the CA bundle used by every client; call before starting threads."""
        RestClient._certificate_file = path

    @staticmethod
    def session_count() -> int:
        return engine.count

    # Session

    def init_session(self, https: bool = False, settings: Settings | int = Settings()) -> bool:
        settings = Settings.coerce(settings)
        if self._session is not None:
            if settings.enable_logging:
                self._logger.error(LOG_ERROR_ALREADY_INIT_MSG)
            return False

        try:
            session = self._transport_factory(self._logger)
        except RestClientError as exc:
            if settings.enable_logging:
                self._logger.error(LOG_ERROR_SESSION_FAILURE_FORMAT, exc)
            return False

        self._session = session
        self.https = https
        self._settings = settings
        return True

    def cleanup_session(self) -> bool:
        if self._session is None:
            self._log_error(LOG_ERROR_NOT_INIT_MSG)
            return False

        self._session.close()
        self._session = None
        self._header_list = []
        return True

    def close(self) -> None:
        """Destroy the client, force-cleaning a session that is still live."""
        if self._closed:
            return
        if self._session is not None:
            if self._settings.enable_logging:
                self._logger.warn(LOG_WARNING_OBJECT_NOT_CLEANED)
            self.cleanup_session()
        self._closed = True
        engine.release()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._session is not None:
            self.cleanup_session()
        self.close()

    def __del__(self) -> None:
        if not getattr(self, "_closed", True):
            self.close()

    def add_header(self, header: str) -> None:
        """Append a raw ``"Name: value"`` line to the next request's header list."""
        self._header_list.append(header)

    # REST requests

    def head(self, url: str, headers: Mapping[str, str] | None = None, response: Response | None = None) -> RequestResult:
        response = response if response is not None else Response()
        session = self._prepare(url, headers, response)
        if session is None:
            return RequestResult(False, response)

        opts = session.options
        opts.method = "HEAD"
        opts.no_body = True
        return self._finalize(self._perform(session), session, response)

    def get(self, url: str, headers: Mapping[str, str] | None = None, response: Response | None = None) -> RequestResult:
        response = response if response is not None else Response()
        session = self._prepare(url, headers, response)
        if session is None:
            return RequestResult(False, response)

        session.options.method = "GET"
        return self._finalize(self._perform(session), session, response)

    def delete(self, url: str, headers: Mapping[str, str] | None = None, response: Response | None = None) -> RequestResult:
        response = response if response is not None else Response()
        session = self._prepare(url, headers, response)
        if session is None:
            return RequestResult(False, response)

        session.options.method = "DELETE"
        return self._finalize(self._perform(session), session, response)

    def post(
        self,
        url: str,
        headers: Mapping[str, str] | None,
        body: str | ByteBuffer,
        response: Response | None = None,
    ) -> RequestResult:
        response = response if response is not None else Response()
        session = self._prepare(url, headers, response)
        if session is None:
            return RequestResult(False, response)

        opts = session.options
        opts.method = "POST"
        opts.body = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        return self._finalize(self._perform(session), session, response)

    def put(
        self,
        url: str,
        headers: Mapping[str, str] | None,
        body: str | ByteBuffer,
        response: Response | None = None,
    ) -> RequestResult:
        """PUT text or binary data, streamed through an :class:`UploadSource`."""
        response = response if response is not None else Response()
        session = self._prepare(url, headers, response)
        if session is None:
            return RequestResult(False, response)

        source = UploadSource(body)
        opts = session.options
        opts.method = "PUT"
        opts.upload = source
        opts.upload_size = len(source)
        return self._finalize(self._perform(session), session, response)

    # Request lifecycle

    def _prepare(
        self, url: str, headers: Mapping[str, str] | None, response: Response
    ) -> Transport | None:
        session = self._session
        if not url:
            self._log_error(LOG_ERROR_EMPTY_HOST_MSG)
            return None
        if session is None:
            self._log_error(LOG_ERROR_NOT_INIT_MSG)
            return None

        # Options left over from the previous request must not leak into this one
        session.reset()
        self._url, self.https = normalize_url(url, self.https)
        session.options.sink = response

        for key, value in (headers or {}).items():
            self.add_header(f"{key}: {value}")
        return session

    def _perform(self, session: Transport) -> TransportCode:
        opts = session.options
        opts.url = self._url
        opts.headers = self._header_list
        opts.user_agent = USER_AGENT
        opts.auto_referer = True
        opts.follow_location = True

        if self.timeout > 0:
            opts.timeout = self.timeout
            opts.no_signal = True
        if self.no_signal:
            opts.no_signal = True

        if self.https:
            opts.use_ssl = True
            opts.verify_peer = self._settings.verify_peer
            opts.verify_host = self._settings.verify_host
            if RestClient._certificate_file:
                opts.ca_info = RestClient._certificate_file
            if self.ssl_cert_file:
                opts.ssl_cert = self.ssl_cert_file
            if self.ssl_key_file:
                opts.ssl_key = self.ssl_key_file
            if self.ssl_key_password:
                opts.key_password = self.ssl_key_password

        try:
            return session.perform()
        finally:
            self._header_list = []
            opts.headers = []

    def _finalize(self, code: TransportCode, session: Transport, response: Response) -> RequestResult:
        if code != TransportCode.OK:
            response.mark_failed()
            code = TransportCode(code)
            self._log_error(LOG_ERROR_REST_FAILURE_FORMAT, self._url, int(code), code.description)
            return RequestResult(False, response)

        response.status_code = session.response_code()
        return RequestResult(True, response)

    def _log_error(self, msg: str, *args: Any) -> None:
        if self._settings.enable_logging:
            self._logger.error(msg, *args)


__all__ = ["RestClient", "USER_AGENT"]
