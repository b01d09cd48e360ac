"""Shared typing helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Union

if TYPE_CHECKING:
    from .response import Response

HeadersMap = dict[str, str]
ByteBuffer = Union[bytes, bytearray, memoryview]


class RequestResult(NamedTuple):
    ok: bool
    response: Response

    def __bool__(self) -> bool:
        return self.ok


__all__ = ["ByteBuffer", "HeadersMap", "RequestResult"]
