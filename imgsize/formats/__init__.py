"""
imgsize Built-in Formats

Each parser maps a complete file's bytes to ImageMetadata by walking its
container structure.
"""

from imgsize.formats.jpeg import JpegParser
from imgsize.formats.png import PngParser

__all__ = [
    "JpegParser",
    "PngParser",
]
