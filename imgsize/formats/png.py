"""
imgsize PNG Parser

Walks PNG chunks. Dimensions come from IHDR, which must be the first chunk;
tEXt chunks contribute their text (the part after the keyword) as comments.
CRCs are read past but not verified.

Chunk layout:
    length (4 BE) | type (4) | data (length) | crc (4)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from imgsize.cursor import ByteCursor
from imgsize.errors import InvalidHeader, TruncatedChunk, UnexpectedEof, UnrecognizedFormat
from imgsize.parser import FormatParser, ImageMetadata
from imgsize.sniffer import ImageFormat, PNG_SIGNATURE, Signature

_LOGGER = logging.getLogger(__name__)

IHDR = b"IHDR"
IEND = b"IEND"
TEXT = b"tEXt"


@dataclass(frozen=True)
class _Chunk:
    type: bytes
    offset: int
    payload: bytes

    @property
    def type_name(self) -> str:
        return self.type.decode("ascii", errors="replace")


class PngParser(FormatParser):

    # Chunk types whose text portion is recorded as a comment
    COMMENT_CHUNK_TYPES: tuple[bytes, ...] = (TEXT,)

    @property
    def name(self) -> str:
        return "PNG"

    @property
    def format(self) -> ImageFormat:
        return ImageFormat.PNG

    @property
    def signature(self) -> Signature:
        return PNG_SIGNATURE

    def parse(self, data: bytes) -> ImageMetadata:
        if not self.signature.matches(data):
            raise UnrecognizedFormat("Bad PNG signature")

        cursor = ByteCursor(data)
        cursor.skip(len(self.signature.pattern))

        dimensions: Optional[tuple[int, int]] = None
        comments: list[bytes] = []

        while not cursor.at_end:
            chunk = self._read_chunk(cursor)

            if dimensions is None:
                if chunk.type != IHDR:
                    raise InvalidHeader(
                        f"First chunk is {chunk.type_name}, expected IHDR",
                        chunk.offset,
                    )
                dimensions = self._read_header(chunk)
            elif chunk.type == IHDR:
                _LOGGER.warning("Ignoring duplicate IHDR chunk at %#x", chunk.offset)
            elif chunk.type in self.COMMENT_CHUNK_TYPES:
                comments.append(self._read_text(chunk))
            elif chunk.type == IEND:
                break
            else:
                _LOGGER.debug("Skipping %s chunk at %#x (%d bytes)",
                              chunk.type_name, chunk.offset, len(chunk.payload))

        if dimensions is None:
            raise InvalidHeader("IHDR chunk missing from PNG", cursor.position)

        width, height = dimensions
        return ImageMetadata(width=width, height=height, comments=tuple(comments))

    def _read_chunk(self, cursor: ByteCursor) -> _Chunk:
        offset = cursor.position
        try:
            length = cursor.read_u32_be()
            chunk_type = cursor.take(4)
        except UnexpectedEof as e:
            raise TruncatedChunk(
                f"Incomplete chunk header ({cursor.size - offset} bytes left)", offset,
            ) from e

        # Length + CRC must both fit before anything is consumed
        if length + 4 > cursor.remaining:
            raise TruncatedChunk(
                f"{chunk_type.decode('ascii', errors='replace')} chunk declares "
                f"{length} bytes, only {max(cursor.remaining - 4, 0)} available",
                offset,
            )
        payload = cursor.take(length)
        cursor.skip(4)  # CRC, not verified

        return _Chunk(type=chunk_type, offset=offset, payload=payload)

    def _read_header(self, chunk: _Chunk) -> tuple[int, int]:
        """Read (width, height) from IHDR.

        Bit depth, colour type, compression, filter and interlace bytes
        follow the dimensions and are ignored.
        """
        if len(chunk.payload) < 8:
            raise InvalidHeader(
                f"Invalid IHDR chunk length: {len(chunk.payload)}", chunk.offset,
            )
        header = ByteCursor(chunk.payload)
        width = header.read_u32_be()
        height = header.read_u32_be()
        if width == 0 or height == 0:
            raise InvalidHeader(f"IHDR declares {width}x{height}", chunk.offset)
        return width, height

    def _read_text(self, chunk: _Chunk) -> bytes:
        """Text portion of a keyword\\0text payload."""
        keyword, sep, text = chunk.payload.partition(b"\x00")
        if not sep:
            _LOGGER.warning("%s chunk at %#x has no keyword separator",
                            chunk.type_name, chunk.offset)
            return b""
        _LOGGER.debug("%s comment with keyword %r", chunk.type_name, keyword)
        return text
