"""Response model filled in place by the transport's streaming callbacks."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .types import HeadersMap

# Value stored for header lines that carry no ``key: value`` pair (status line).
PRESENT = "present"

FAILED_STATUS = -1


@dataclass
class Response:
    """Accumulated result of one request.

    ``status_code`` stays 0 until the request completes and becomes -1 when
    the transfer failed locally. ``headers`` and ``content`` grow while the
    transport streams data in and are only meaningful once the request call
    has returned.
    """

    status_code: int = 0
    headers: HeadersMap = field(default_factory=dict)
    content: bytearray = field(default_factory=bytearray)

    @property
    def body(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def failed(self) -> bool:
        return self.status_code == FAILED_STATUS

    def json(self) -> Any:
        return json.loads(self.body)

    def on_body_chunk(self, chunk: bytes) -> int:
        """Append a body chunk verbatim; always consumes the whole chunk."""
        self.content.extend(chunk)
        return len(chunk)

    def on_header_line(self, line: bytes | str) -> int:
        """Record one raw header line and report it as fully consumed.

        Lines are split on the first colon and both halves are trimmed; a
        later line with the same key overwrites the earlier value. Lines
        without a colon (status line) are stored with the :data:`PRESENT`
        value, blank separator lines are ignored.
        """
        size = len(line)
        text = line.decode("latin-1") if isinstance(line, (bytes, bytearray)) else line

        key, sep, value = text.partition(":")
        if not sep:
            stripped = text.strip()
            if stripped:
                self.headers[stripped] = PRESENT
            return size

        self.headers[key.strip()] = value.strip()
        return size

    def mark_failed(self) -> None:
        self.content.clear()
        self.status_code = FAILED_STATUS


__all__ = ["FAILED_STATUS", "PRESENT", "Response"]
