"""Cursor over caller-owned bytes consumed chunk by chunk during an upload."""

from __future__ import annotations

from .types import ByteBuffer


class UploadSource:
    """Transient read position over an outgoing request body.

    Text is encoded as UTF-8. The source lives for a single request; once
    :attr:`remaining` reaches zero it only ever reports end of data.
    """

    def __init__(self, data: str | ByteBuffer) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._view = memoryview(data).cast("B")
        self._position = 0
        self.remaining = len(self._view)

    def __len__(self) -> int:
        return len(self._view)

    @property
    def position(self) -> int:
        return self._position

    def on_read_chunk(self, buffer: bytearray | memoryview) -> int:
        """Copy up to ``len(buffer)`` pending bytes into ``buffer``.

        Returns the number of bytes copied; 0 signals end of data.
        """
        count = min(self.remaining, len(buffer))
        if count:
            buffer[:count] = self._view[self._position : self._position + count]
            self._position += count
            self.remaining -= count
        return count


__all__ = ["UploadSource"]
