"""
imgsize - Fast reader for JPEG and PNG dimensions and comments.

Walks only the container structure of an image (JPEG marker segments, PNG
chunks) to find its width, height and embedded comments. Pixel data is
never decoded.

JPEG: dimensions from the first SOFn segment, comments from COM segments.
PNG:  dimensions from IHDR, comments from the text of tEXt chunks.
"""

__version__ = "0.1.0"

from imgsize.core import MetadataReader, read_bytes, read_file
from imgsize.cursor import ByteCursor
from imgsize.errors import (
    ImageSizeError,
    ImageReadError,
    UnrecognizedFormat,
    TruncatedData,
    UnexpectedEof,
    TruncatedSegment,
    TruncatedChunk,
    MissingDimensions,
    InvalidHeader,
)
from imgsize.formats import JpegParser, PngParser
from imgsize.parser import FormatParser, ImageMetadata
from imgsize.sniffer import ImageFormat, sniff

__all__ = [
    "read_bytes",
    "read_file",
    "MetadataReader",
    "ImageMetadata",
    "FormatParser",
    "JpegParser",
    "PngParser",
    "ByteCursor",
    "ImageFormat",
    "sniff",
    "ImageSizeError",
    "ImageReadError",
    "UnrecognizedFormat",
    "TruncatedData",
    "UnexpectedEof",
    "TruncatedSegment",
    "TruncatedChunk",
    "MissingDimensions",
    "InvalidHeader",
]
