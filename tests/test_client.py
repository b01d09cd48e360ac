from __future__ import annotations

from dataclasses import replace

import pytest

from restcore import (
    PRESENT,
    USER_AGENT,
    Response,
    RestClient,
    RestClientError,
    Settings,
    SettingsFlag,
    TransportCode,
    UploadSource,
)
from restcore.transport.base import TransferOptions


class DummyTransport:
    def __init__(
        self,
        *,
        code: TransportCode = TransportCode.OK,
        status: int = 200,
        header_lines: list[bytes] | None = None,
        body_chunks: list[bytes] | None = None,
    ) -> None:
        self.options = TransferOptions()
        self.code = code
        self.status = status
        self.header_lines = header_lines or []
        self.body_chunks = body_chunks or []
        self.performed: list[TransferOptions] = []
        self.resets = 0
        self.closed = False

    def reset(self) -> None:
        self.options = TransferOptions()
        self.resets += 1

    def perform(self) -> TransportCode:
        opts = self.options
        self.performed.append(replace(opts, headers=list(opts.headers)))
        for line in self.header_lines:
            opts.sink.on_header_line(line)
        for chunk in self.body_chunks:
            opts.sink.on_body_chunk(chunk)
        return self.code

    def response_code(self) -> int:
        return self.status

    def close(self) -> None:
        self.closed = True


def make_client(transport: DummyTransport, messages: list[str] | None = None, **kwargs) -> RestClient:
    sink = messages.append if messages is not None else (lambda msg: None)
    return RestClient(sink, transport_factory=lambda logger: transport, **kwargs)


def test_new_client_defaults() -> None:
    client = make_client(DummyTransport())
    assert client.url == ""
    assert client.https is False
    assert client.no_signal is False
    assert client.timeout == 0
    assert client.session is None
    assert client.settings == Settings.all()
    assert client.ssl_cert_file == ""
    assert client.ssl_key_file == ""
    assert client.ssl_key_password == ""
    client.close()


def test_init_session_applies_arguments() -> None:
    transport = DummyTransport()
    client = make_client(transport)
    assert client.init_session(True, SettingsFlag.ENABLE_LOG)
    assert client.settings == Settings(enable_logging=True, verify_peer=False, verify_host=False)
    assert client.https is True
    assert client.session is transport
    assert client.cleanup_session()
    assert transport.closed is True
    client.close()


def test_double_init_keeps_original_handle() -> None:
    messages: list[str] = []
    first = DummyTransport()
    client = make_client(first, messages)
    assert client.init_session()
    assert client.init_session() is False
    assert client.session is first
    assert "already initialized" in messages[-1]
    assert client.cleanup_session()
    client.close()


def test_cleanup_without_init_fails() -> None:
    messages: list[str] = []
    client = make_client(DummyTransport(), messages)
    assert client.cleanup_session() is False
    assert "not initialized" in messages[-1]
    client.close()


def test_double_cleanup_fails_second_time() -> None:
    client = make_client(DummyTransport())
    assert client.init_session()
    assert client.cleanup_session()
    assert client.cleanup_session() is False
    client.close()


def test_disabled_logging_keeps_return_values() -> None:
    messages: list[str] = []
    client = make_client(DummyTransport(), messages)
    assert client.init_session(settings=Settings.none())
    assert client.init_session(settings=Settings.none()) is False
    assert client.cleanup_session()
    assert client.cleanup_session() is False
    assert client.get("", {}).ok is False
    assert messages == []
    client.close()


def test_session_factory_failure_returns_false() -> None:
    def broken_factory(logger):
        raise RestClientError("no handle")

    messages: list[str] = []
    client = RestClient(messages.append, transport_factory=broken_factory)
    assert client.init_session() is False
    assert client.session is None
    assert "no handle" in messages[-1]
    client.close()


def test_request_without_session_leaves_response_untouched() -> None:
    messages: list[str] = []
    client = make_client(DummyTransport(), messages)
    response = Response(status_code=7)
    response.content.extend(b"stale")
    ok, returned = client.get("http://example.com", {}, response)
    assert ok is False
    assert returned is response
    assert response.status_code == 7
    assert response.body == "stale"
    assert "not initialized" in messages[-1]
    client.close()


def test_empty_url_fails_before_touching_transport() -> None:
    messages: list[str] = []
    transport = DummyTransport()
    client = make_client(transport, messages)
    client.init_session()
    assert client.get("", {}).ok is False
    assert transport.resets == 0
    assert transport.performed == []
    assert "Empty hostname" in messages[-1]
    client.cleanup_session()
    client.close()


def test_get_collects_headers_and_body() -> None:
    transport = DummyTransport(
        header_lines=[b"HTTP/1.1 200 OK\r\n", b"Content-Type: text/plain\r\n", b"\r\n"],
        body_chunks=[b"hello ", b"world"],
    )
    client = make_client(transport)
    client.init_session()
    ok, response = client.get("http://example.com/get", {"Accept": "text/plain"})
    assert ok is True
    assert response.status_code == 200
    assert response.body == "hello world"
    assert response.headers == {"HTTP/1.1 200 OK": PRESENT, "Content-Type": "text/plain"}

    opts = transport.performed[0]
    assert opts.method == "GET"
    assert opts.url == "http://example.com/get"
    assert opts.headers == ["Accept: text/plain"]
    assert opts.user_agent == USER_AGENT
    assert opts.follow_location is True
    assert opts.auto_referer is True
    client.cleanup_session()
    client.close()


def test_http_error_status_is_a_successful_request() -> None:
    client = make_client(DummyTransport(status=404, body_chunks=[b"missing"]))
    client.init_session()
    ok, response = client.get("http://example.com/nope")
    assert ok is True
    assert response.status_code == 404
    assert response.body == "missing"
    client.cleanup_session()
    client.close()


def test_transport_failure_resets_response() -> None:
    messages: list[str] = []
    transport = DummyTransport(code=TransportCode.COULDNT_RESOLVE_HOST, body_chunks=[b"partial"])
    client = make_client(transport, messages)
    client.init_session()
    ok, response = client.get("nonexistent-host-xyz")
    assert ok is False
    assert response.status_code == -1
    assert response.body == ""
    assert messages[-1] == (
        "[RestClient][Error] Unable to perform a REST request from 'http://nonexistent-host-xyz' "
        "(Error = 6 | Couldn't resolve host name)"
    )
    client.cleanup_session()
    client.close()


def test_bare_host_takes_scheme_from_https_flag() -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session(https=True)
    client.get("example.com/x")
    assert transport.performed[0].url == "https://example.com/x"
    assert client.url == "https://example.com/x"
    client.cleanup_session()
    client.close()


def test_explicit_scheme_overrides_https_flag() -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session(https=True)
    client.get("HTTP://example.com")
    assert client.https is False
    assert transport.performed[0].url == "HTTP://example.com"
    assert transport.performed[0].use_ssl is False

    client.get("https://example.com/secure")
    assert client.https is True
    assert transport.performed[1].use_ssl is True
    client.cleanup_session()
    client.close()


def test_each_request_resets_transport_options() -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session()
    client.head("http://example.com")
    client.get("http://example.com")
    assert transport.resets == 2
    assert transport.performed[0].no_body is True
    assert transport.performed[1].no_body is False
    client.cleanup_session()
    client.close()


@pytest.mark.parametrize(
    ("method", "expected"),
    [("head", "HEAD"), ("get", "GET"), ("delete", "DELETE")],
)
def test_bodyless_methods(method: str, expected: str) -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session()
    assert getattr(client, method)("http://example.com/item", {}).ok
    opts = transport.performed[0]
    assert opts.method == expected
    assert opts.body is None
    assert opts.upload is None
    client.cleanup_session()
    client.close()


def test_post_attaches_body() -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session()
    client.post("http://example.com/post", {"Content-Type": "application/json"}, '{"a": 1}')
    opts = transport.performed[0]
    assert opts.method == "POST"
    assert opts.body == b'{"a": 1}'
    assert opts.headers == ["Content-Type: application/json"]
    client.cleanup_session()
    client.close()


@pytest.mark.parametrize("body", ["text payload", b"\x00\x01binary\xff", bytearray(b"buffer")])
def test_put_streams_through_upload_source(body) -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session()
    client.put("http://example.com/put", {}, body)
    opts = transport.performed[0]
    expected = body.encode("utf-8") if isinstance(body, str) else bytes(body)
    assert opts.method == "PUT"
    assert isinstance(opts.upload, UploadSource)
    assert opts.upload_size == len(expected)
    client.cleanup_session()
    client.close()


def test_sequential_posts_do_not_share_headers() -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session()
    client.post("http://example.com/post", {"X-First": "1"}, "one")
    client.post("http://example.com/post", {"X-Second": "2"}, "two")
    assert transport.performed[0].headers == ["X-First: 1"]
    assert transport.performed[1].headers == ["X-Second: 2"]
    assert transport.performed[1].body == b"two"
    client.cleanup_session()
    client.close()


def test_add_header_is_consumed_by_next_request() -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session()
    client.add_header("X-Trace: abc")
    client.get("http://example.com", {"Accept": "*/*"})
    client.get("http://example.com")
    assert transport.performed[0].headers == ["X-Trace: abc", "Accept: */*"]
    assert transport.performed[1].headers == []
    client.cleanup_session()
    client.close()


def test_headers_released_even_when_transfer_fails() -> None:
    transport = DummyTransport(code=TransportCode.COULDNT_CONNECT)
    client = make_client(transport)
    client.init_session()
    client.get("http://example.com", {"X-Once": "1"})
    transport.code = TransportCode.OK
    client.get("http://example.com")
    assert transport.performed[1].headers == []
    client.cleanup_session()
    client.close()


def test_timeout_also_suppresses_signals() -> None:
    transport = DummyTransport()
    client = make_client(transport, timeout=10)
    client.init_session()
    client.get("http://example.com")
    assert transport.performed[0].timeout == 10
    assert transport.performed[0].no_signal is True

    client.timeout = 0
    client.no_signal = True
    client.get("http://example.com")
    assert transport.performed[1].timeout == 0
    assert transport.performed[1].no_signal is True
    client.cleanup_session()
    client.close()


def test_tls_options_only_apply_to_https(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(RestClient, "_certificate_file", "")
    transport = DummyTransport()
    client = make_client(
        transport,
        ssl_cert_file="file.cert",
        ssl_key_file="key.key",
        ssl_key_password="passphrase",
    )
    RestClient.set_certificate_file("ca.pem")
    assert RestClient.get_certificate_file() == "ca.pem"
    client.init_session(settings=Settings(verify_peer=False))

    client.get("http://example.com")
    plain = transport.performed[0]
    assert plain.use_ssl is False
    assert plain.ca_info is None
    assert plain.ssl_cert is None

    client.get("https://example.com")
    secure = transport.performed[1]
    assert secure.use_ssl is True
    assert secure.verify_peer is False
    assert secure.verify_host is True
    assert secure.ca_info == "ca.pem"
    assert secure.ssl_cert == "file.cert"
    assert secure.ssl_key == "key.key"
    assert secure.key_password == "passphrase"
    client.cleanup_session()
    client.close()


def test_verification_defaults_on() -> None:
    transport = DummyTransport()
    client = make_client(transport)
    client.init_session(https=True)
    client.get("example.com")
    assert transport.performed[0].verify_peer is True
    assert transport.performed[0].verify_host is True
    client.cleanup_session()
    client.close()


def test_close_warns_and_cleans_live_session() -> None:
    messages: list[str] = []
    transport = DummyTransport()
    before = RestClient.session_count()
    client = make_client(transport, messages)
    assert RestClient.session_count() == before + 1
    client.init_session()
    client.close()
    assert transport.closed is True
    assert client.session is None
    assert "Warning" in messages[-1]
    assert RestClient.session_count() == before
    client.close()
    assert RestClient.session_count() == before


def test_context_manager_cleans_quietly() -> None:
    messages: list[str] = []
    transport = DummyTransport()
    with make_client(transport, messages) as client:
        client.init_session()
    assert transport.closed is True
    assert messages == []


def test_request_result_truthiness_follows_ok() -> None:
    client = make_client(DummyTransport(code=TransportCode.COULDNT_CONNECT))
    client.init_session()
    assert not client.get("http://example.com")
    client.cleanup_session()
    client.close()
