"""
imgsize Byte Cursor

A bounds-checked forward reader over an in-memory byte buffer. All format
parsers read through a ByteCursor; none of them index the buffer directly.

The primitive reads are delegated to a KaitaiStream. Every read is checked
against the remaining byte count *before* it reaches the stream, so a failed
read raises UnexpectedEof and leaves the position where it was.

Usage:
    cursor = ByteCursor(b"\\x00\\x10\\xff")
    cursor.read_u16_be()   # 16
    cursor.read_u16_be()   # raises UnexpectedEof, position stays at 2
"""

from __future__ import annotations

import io
from typing import Optional, Union

from kaitaistruct import KaitaiStream

from imgsize.errors import UnexpectedEof


class ByteCursor:
    """Forward reader over a borrowed byte buffer.

    Invariant: 0 <= position <= size. The buffer is never modified.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self._data = bytes(data)
        self._size = len(self._data)
        self._stream = KaitaiStream(io.BytesIO(self._data))

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------

    @property
    def position(self) -> int:
        return self._stream.pos()

    @property
    def size(self) -> int:
        return self._size

    @property
    def remaining(self) -> int:
        return self._size - self._stream.pos()

    @property
    def at_end(self) -> bool:
        return self.remaining == 0

    def seek(self, offset: int) -> None:
        """Move to an absolute offset within the buffer."""
        if offset < 0 or offset > self._size:
            raise UnexpectedEof(
                f"Cannot seek to {offset} in a {self._size}-byte buffer",
                self.position,
            )
        self._stream.seek(offset)

    def _require(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"Byte count must not be negative, got {n}")
        if n > self.remaining:
            raise UnexpectedEof(
                f"Requested {n} bytes, only {self.remaining} available",
                self.position,
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_u8(self) -> int:
        self._require(1)
        return self._stream.read_u1()

    def read_u16_be(self) -> int:
        self._require(2)
        return self._stream.read_u2be()

    def read_u16_le(self) -> int:
        self._require(2)
        return self._stream.read_u2le()

    def read_u32_be(self) -> int:
        self._require(4)
        return self._stream.read_u4be()

    def take(self, n: int) -> bytes:
        """Consume and return the next n bytes."""
        self._require(n)
        return self._stream.read_bytes(n)

    def skip(self, n: int) -> None:
        """Advance past the next n bytes without copying them."""
        self._require(n)
        self._stream.seek(self._stream.pos() + n)

    # ------------------------------------------------------------------
    # Lookahead (never moves the position)
    # ------------------------------------------------------------------

    def peek(self, n: int) -> bytes:
        self._require(n)
        pos = self.position
        return self._data[pos:pos + n]

    def peek_u8(self) -> int:
        self._require(1)
        return self._data[self.position]

    def find(self, byte: int) -> Optional[int]:
        """Absolute offset of the next `byte` at or after the position, or None."""
        idx = self._data.find(bytes((byte,)), self.position)
        return idx if idx >= 0 else None

    def __repr__(self) -> str:
        return f"<ByteCursor {self.position:#x}/{self._size:#x}>"
