"""
imgsize JPEG Parser

Walks JPEG marker segments. Dimensions come from the first frame (SOFn)
header; every COM segment is collected verbatim as a comment. Pixel data is
never decoded: entropy-coded scan data is skipped by resynchronising on the
next marker.

Segment layout:
    FF xx                     standalone marker (SOI, EOI, TEM, RST0-7)
    FF xx LL LL <LLLL-2 bytes> every other marker
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from imgsize.cursor import ByteCursor
from imgsize.errors import (
    MissingDimensions,
    TruncatedSegment,
    UnexpectedEof,
    UnrecognizedFormat,
)
from imgsize.parser import FormatParser, ImageMetadata
from imgsize.sniffer import ImageFormat, JPEG_SIGNATURE, Signature

_LOGGER = logging.getLogger(__name__)

SOI = 0xFFD8
EOI = 0xFFD9
SOS = 0xFFDA
COM = 0xFFFE
TEM = 0xFF01

RST_MARKERS = frozenset(range(0xFFD0, 0xFFD8))
STANDALONE_MARKERS = frozenset({SOI, EOI, TEM}) | RST_MARKERS

# DHT, JPG and DAC share the SOFn range but carry no frame header
NON_FRAME_MARKERS = frozenset({0xFFC4, 0xFFC8, 0xFFCC})
FRAME_MARKERS = frozenset(range(0xFFC0, 0xFFD0)) - NON_FRAME_MARKERS

MARKER_NAMES: dict[int, str] = {
    SOI: "SOI",
    EOI: "EOI",
    SOS: "SOS",
    COM: "COM",
    TEM: "TEM",
    0xFFC4: "DHT",
    0xFFC8: "JPG",
    0xFFCC: "DAC",
    0xFFDB: "DQT",
    0xFFDD: "DRI",
}
MARKER_NAMES.update({m: f"SOF{m - 0xFFC0}" for m in FRAME_MARKERS})
MARKER_NAMES.update({m: f"RST{m - 0xFFD0}" for m in RST_MARKERS})
MARKER_NAMES.update({m: f"APP{m - 0xFFE0}" for m in range(0xFFE0, 0xFFF0)})


def marker_name(marker: int) -> str:
    return MARKER_NAMES.get(marker, f"{marker:#06x}")


def is_frame_marker(marker: int) -> bool:
    return marker in FRAME_MARKERS


def is_standalone_marker(marker: int) -> bool:
    return marker in STANDALONE_MARKERS


class _ScanState(Enum):
    EXPECT_MARKER = auto()
    ENTROPY_DATA = auto()   # after SOS; non-marker bytes are expected
    DONE = auto()


@dataclass(frozen=True)
class _Segment:
    marker: int
    offset: int
    payload: bytes


class JpegParser(FormatParser):

    @property
    def name(self) -> str:
        return "JPEG"

    @property
    def format(self) -> ImageFormat:
        return ImageFormat.JPEG

    @property
    def signature(self) -> Signature:
        return JPEG_SIGNATURE

    def parse(self, data: bytes) -> ImageMetadata:
        if not self.signature.matches(data):
            raise UnrecognizedFormat("No SOI marker found")

        cursor = ByteCursor(data)
        cursor.skip(len(self.signature.pattern))

        dimensions: Optional[tuple[int, int]] = None
        comments: list[bytes] = []
        state = _ScanState.EXPECT_MARKER

        while state is not _ScanState.DONE:
            marker = self._next_marker(cursor, quiet=state is _ScanState.ENTROPY_DATA)
            if marker is None or marker == EOI:
                state = _ScanState.DONE
                continue

            if marker in STANDALONE_MARKERS:
                continue

            segment = self._read_segment(cursor, marker)

            if marker in FRAME_MARKERS:
                if dimensions is None:
                    dimensions = self._read_frame(segment)
                    if 0 in dimensions:
                        raise MissingDimensions(
                            f"{marker_name(marker)} declares {dimensions[0]}x{dimensions[1]}",
                            segment.offset,
                            tuple(comments),
                        )
                else:
                    _LOGGER.debug("Ignoring additional frame header %s at %#x",
                                  marker_name(marker), segment.offset)
                state = _ScanState.EXPECT_MARKER
            elif marker == COM:
                comments.append(segment.payload)
                state = _ScanState.EXPECT_MARKER
            elif marker == SOS:
                state = _ScanState.ENTROPY_DATA
            else:
                state = _ScanState.EXPECT_MARKER

        if dimensions is None:
            raise MissingDimensions("No SOF marker found", cursor.position, tuple(comments))

        width, height = dimensions
        return ImageMetadata(width=width, height=height, comments=tuple(comments))

    def _next_marker(self, cursor: ByteCursor, quiet: bool = False) -> Optional[int]:
        """Advance to the next marker and consume it.

        Returns None once fewer than two bytes remain. Every iteration
        consumes at least one byte.
        """
        while cursor.remaining >= 2:
            first, second = cursor.peek(2)

            if first != 0xFF:
                if not quiet:
                    _LOGGER.warning("Resyncing to next marker from position %#x",
                                    cursor.position)
                next_ff = cursor.find(0xFF)
                cursor.seek(cursor.size if next_ff is None else next_ff)
                continue

            if second == 0xFF:
                # Fill byte
                cursor.skip(1)
                continue

            if second == 0x00:
                # Stuffed 0xFF inside scan data
                cursor.skip(2)
                continue

            return cursor.read_u16_be()

        return None

    def _read_segment(self, cursor: ByteCursor, marker: int) -> _Segment:
        offset = cursor.position - 2
        name = marker_name(marker)

        try:
            length = cursor.read_u16_be()
        except UnexpectedEof as e:
            raise TruncatedSegment(f"{name} has no length field", offset) from e

        if length < 2:
            raise TruncatedSegment(f"Invalid {name} segment length: {length}", offset)

        try:
            payload = cursor.take(length - 2)
        except UnexpectedEof as e:
            raise TruncatedSegment(
                f"{name} declares {length - 2} payload bytes, "
                f"only {cursor.remaining} available",
                offset,
            ) from e

        _LOGGER.debug("%s segment at %#x (%d bytes)", name, offset, length - 2)
        return _Segment(marker=marker, offset=offset, payload=payload)

    def _read_frame(self, segment: _Segment) -> tuple[int, int]:
        """Read (width, height) from a SOFn payload.

        Payload: precision (1), height (2 BE), width (2 BE), components...
        """
        if len(segment.payload) < 5:
            raise TruncatedSegment(
                f"{marker_name(segment.marker)} data is too short "
                f"({len(segment.payload)} bytes)",
                segment.offset,
            )
        frame = ByteCursor(segment.payload)
        frame.skip(1)
        height = frame.read_u16_be()
        width = frame.read_u16_be()
        return width, height
