"""Positioned reads against a seekable binary stream."""
from __future__ import annotations

from typing import BinaryIO

from dbfdump.dbf.errors import IoFailure


class ByteSource:
    """Wraps a readable, seekable stream with a single read-at-offset primitive.

    The stream position is private state: every read seeks first, so callers
    never depend on where a previous read left the cursor.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def read_at(self, offset: int, length: int) -> bytes:
        """Read exactly `length` bytes starting at absolute `offset`."""
        data = self.read_upto(offset, length)
        if len(data) != length:
            raise IoFailure(f"Short read: got {len(data)} bytes", offset=offset, length=length)
        return data

    def read_upto(self, offset: int, length: int) -> bytes:
        """Read at most `length` bytes starting at absolute `offset`."""
        if offset < 0 or length < 0:
            raise IoFailure("Invalid read range", offset=offset, length=length)
        try:
            self._stream.seek(offset)
        except (OSError, ValueError) as e:
            raise IoFailure(f"Couldn't seek: {e}", offset=offset, length=length) from e

        chunks = []
        remaining = length
        while remaining > 0:
            try:
                chunk = self._stream.read(remaining)
            except (OSError, ValueError) as e:
                raise IoFailure(f"Couldn't read bytes: {e}", offset=offset, length=length) from e
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def close(self) -> None:
        self._stream.close()

    @property
    def closed(self) -> bool:
        return self._stream.closed
