"""
imgsize Parser Base

A FormatParser is a pure function from a byte buffer to ImageMetadata (or a
typed error). This module defines the result type and the base class every
container format implements.

Key concepts:
- ImageMetadata: (width, height, comments), dimensions always both present
- FormatParser: one per container format, selected by its magic signature
- Parsers are stateless; one instance can serve any number of calls
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from imgsize.sniffer import ImageFormat, Signature


@dataclass(frozen=True)
class ImageMetadata:
    """An image's dimensions, along with any comments found in the data.

    Attributes:
        width: Width in pixels, always positive
        height: Height in pixels, always positive
        comments: Raw comment payloads in the order they appear in the file
    """
    width: int
    height: int
    comments: tuple[bytes, ...] = ()

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Dimensions must be positive, got {self.width}x{self.height}"
            )
        if isinstance(self.comments, (bytes, bytearray, memoryview, str)):
            raise TypeError(
                f"comments must be a sequence of byte strings, not {type(self.comments).__name__}"
            )
        # Accept any iterable of byte strings, store an immutable tuple
        object.__setattr__(self, "comments", tuple(bytes(c) for c in self.comments))

    @property
    def text_comments(self) -> list[str]:
        """Comments decoded as UTF-8, undecodable bytes replaced."""
        return [c.decode("utf-8", errors="replace") for c in self.comments]

    def __repr__(self) -> str:
        return (
            f"<ImageMetadata: {self.width}x{self.height} "
            f"comments={len(self.comments)}>"
        )


class FormatParser(ABC):
    """Base class for all container format parsers.

    Subclasses implement:
        - name: Human-readable identifier
        - format: The ImageFormat this parser handles
        - signature: Magic bytes identifying the format
        - parse(): The scanning logic

    Usage:
        parser = PngParser()
        metadata = parser.parse(png_bytes)
        print(metadata.width, metadata.height)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this parser (e.g., 'JPEG', 'PNG')."""
        ...

    @property
    @abstractmethod
    def format(self) -> ImageFormat:
        ...

    @property
    @abstractmethod
    def signature(self) -> Signature:
        ...

    @abstractmethod
    def parse(self, data: bytes) -> ImageMetadata:
        """Scan `data` and return its dimensions and comments.

        Implementations must:
        1. Verify the format signature at the start of `data`
        2. Walk the container structure through a ByteCursor
        3. Raise a typed ImageSizeError on any structural failure

        Args:
            data: Complete file contents

        Returns:
            ImageMetadata with width, height and comments
        """
        ...

    def __repr__(self) -> str:
        return f"<Parser:{self.name}>"

    def __hash__(self) -> int:
        return hash(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormatParser):
            return NotImplemented
        return self.name == other.name
