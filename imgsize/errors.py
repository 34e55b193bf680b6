"""
imgsize Errors

Every failure raised by the reader derives from ImageSizeError, so callers
can catch a single base class. Dimensions are never returned partially:
either both width and height are known, or one of these is raised.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class ImageSizeError(Exception):
    """Base class for all imgsize errors."""


class ImageReadError(ImageSizeError):
    """The underlying file could not be read.

    The original OSError is chained as __cause__.
    """

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = Path(path)


class UnrecognizedFormat(ImageSizeError):
    """The data starts with neither a JPEG nor a PNG signature."""


class TruncatedData(ImageSizeError):
    """A declared length extends past the available bytes."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at {position:#x})")
        self.position = position


class UnexpectedEof(TruncatedData):
    """A ByteCursor read ran past the end of its buffer."""


class TruncatedSegment(TruncatedData):
    """A JPEG marker segment is cut short or has a malformed length."""


class TruncatedChunk(TruncatedData):
    """A PNG chunk is cut short."""


class MissingDimensions(ImageSizeError):
    """The JPEG stream ended without a usable frame header.

    Comments found before the failure are kept on the exception so they
    are not lost along with the dimensions.
    """

    def __init__(
        self,
        message: str,
        position: int,
        comments: Optional[tuple[bytes, ...]] = None,
    ) -> None:
        super().__init__(f"{message} (at {position:#x})")
        self.position = position
        self.comments = comments or ()


class InvalidHeader(ImageSizeError):
    """The PNG stream lacks a valid IHDR as its first chunk."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at {position:#x})")
        self.position = position
