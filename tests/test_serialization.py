import json

import pytest

from restcore.errors import ParseError
from restcore.response import Response
from restcore.serialization import (
    is_valid_json,
    parse_headers_json,
    response_to_envelope,
    response_to_json,
)


def make_response(body: str) -> Response:
    response = Response(status_code=201)
    response.on_header_line(b"Content-Type: application/json\r\n")
    response.on_body_chunk(body.encode("utf-8"))
    return response


def test_parse_headers_json_reads_header_object() -> None:
    headers = parse_headers_json('{"Header": {"Accept": "text/plain", "X-Id": "7"}}')
    assert headers == {"Accept": "text/plain", "X-Id": "7"}


@pytest.mark.parametrize(
    "text",
    [
        "",
        "{not json",
        '{"Headers": {"Accept": "text/plain"}}',
        '["Header"]',
        '{"Header": ["Accept"]}',
        '{"Header": {"X-Id": 7}}',
    ],
)
def test_parse_headers_json_rejects_bad_input(text: str) -> None:
    with pytest.raises(ParseError):
        parse_headers_json(text)


def test_is_valid_json() -> None:
    assert is_valid_json('{"a": [1, 2]}')
    assert not is_valid_json("{'a': 1}")


def test_response_to_json_escapes_body() -> None:
    response = make_response('say "hi"\n')
    text = response_to_json(response)
    assert json.loads(text) == {
        "Status-Code": 201,
        "Header": {"Content-Type": "application/json"},
        "Body": 'say "hi"\n',
    }
    assert text.startswith('{"Status-Code":201,"Header":')


def test_envelope_escapes_body_by_default() -> None:
    text = response_to_envelope(make_response('plain "text"'))
    assert json.loads(text) == {
        "Status-Code": 201,
        "Headers": [{"Content-Type": "application/json"}],
        "Body": 'plain "text"',
    }


def test_envelope_can_splice_raw_body() -> None:
    text = response_to_envelope(make_response('{"id": 3}'), escape_body=False)
    assert text.endswith('"Body":{"id": 3}}')
    assert json.loads(text)["Body"] == {"id": 3}
