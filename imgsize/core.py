"""
imgsize Core: MetadataReader

The MetadataReader is the registry of known format parsers and the entry
point for reading images. It sniffs the leading bytes, hands the buffer to
the matching parser and returns its ImageMetadata.

Usage:
    reader = MetadataReader()
    metadata = reader.read_file("photo.jpg")
    print(metadata.width, metadata.height, metadata.comments)

Or through the module-level shortcuts:
    imgsize.read_bytes(data)
    imgsize.read_file("image.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from imgsize.errors import ImageReadError
from imgsize.formats import JpegParser, PngParser
from imgsize.parser import FormatParser, ImageMetadata
from imgsize.sniffer import FormatSniffer, ImageFormat

_LOGGER = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


class MetadataReader:
    """Dispatches image data to the parser registered for its format.

    Holds no per-call state, so one reader can be shared between threads.
    """

    def __init__(self) -> None:
        self._parsers: dict[ImageFormat, FormatParser] = {}
        self._sniffer = FormatSniffer(signatures={})
        self.register(JpegParser())
        self.register(PngParser())

    def register(self, parser: FormatParser) -> None:
        """Register a parser, replacing any previous one for its format."""
        self._parsers[parser.format] = parser
        self._sniffer.add(parser.format, parser.signature)

    def get_parser(self, fmt: ImageFormat) -> FormatParser:
        """Retrieve the parser registered for a format."""
        if fmt not in self._parsers:
            raise KeyError(
                f"No parser for '{fmt.value}'. "
                f"Registered: {[f.value for f in self._parsers]}"
            )
        return self._parsers[fmt]

    @property
    def formats(self) -> list[ImageFormat]:
        """List all formats this reader can parse."""
        return list(self._parsers.keys())

    def read_bytes(self, data: BytesLike) -> ImageMetadata:
        """Read the dimensions and comments of an image held in memory.

        Args:
            data: Complete image file contents

        Returns:
            ImageMetadata with width, height and comments

        Raises:
            UnrecognizedFormat: Neither a JPEG nor a PNG signature
            TruncatedSegment / TruncatedChunk: A length runs past the data
            MissingDimensions: No JPEG frame header found
            InvalidHeader: PNG without a valid leading IHDR
        """
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            raise TypeError(f"Cannot read image data from {type(data)}")

        fmt = self._sniffer.require(data)

        parser = self.get_parser(fmt)
        _LOGGER.debug("Parsing %d bytes as %s", len(data), parser.name)
        return parser.parse(data)

    def read_file(self, path: Union[str, Path]) -> ImageMetadata:
        """Read the dimensions and comments of an image file.

        The whole file is read into memory before parsing.

        Raises:
            ImageReadError: The file could not be read
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ImageReadError(path, e.strerror or str(e)) from e
        return self.read_bytes(data)

    def __repr__(self) -> str:
        return f"<MetadataReader: {[p.name for p in self._parsers.values()]}>"


_DEFAULT_READER = MetadataReader()


def read_bytes(data: BytesLike) -> ImageMetadata:
    """Read the dimensions and comments of an image from a byte buffer."""
    return _DEFAULT_READER.read_bytes(data)


def read_file(path: Union[str, Path]) -> ImageMetadata:
    """Read the dimensions and comments of an image from a file."""
    return _DEFAULT_READER.read_file(path)
