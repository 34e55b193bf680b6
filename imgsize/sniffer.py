"""
imgsize Format Sniffer

Classifies a byte buffer as JPEG, PNG or unknown by checking a fixed-size
prefix against known magic signatures. This is an O(1) check that runs
before any parser is invoked.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from imgsize.errors import UnrecognizedFormat


class ImageFormat(Enum):
    JPEG = "jpeg"
    PNG = "png"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Signature:
    """Magic bytes expected at a fixed offset."""
    offset: int
    pattern: bytes
    description: str = ""

    @property
    def end(self) -> int:
        return self.offset + len(self.pattern)

    def matches(self, data: bytes) -> bool:
        if self.end > len(data):
            return False
        return data[self.offset:self.end] == self.pattern


JPEG_SIGNATURE = Signature(0, b"\xff\xd8", "JPEG start-of-image marker")
PNG_SIGNATURE = Signature(0, b"\x89PNG\r\n\x1a\n", "PNG file signature")

SIGNATURES: dict[ImageFormat, Signature] = {
    ImageFormat.JPEG: JPEG_SIGNATURE,
    ImageFormat.PNG: PNG_SIGNATURE,
}


class FormatSniffer:
    """Matches leading bytes against a table of signatures."""

    def __init__(self, signatures: Optional[dict[ImageFormat, Signature]] = None) -> None:
        self._signatures = dict(SIGNATURES if signatures is None else signatures)

    @property
    def min_length(self) -> int:
        """Length of the shortest registered signature."""
        return min((sig.end for sig in self._signatures.values()), default=0)

    def add(self, fmt: ImageFormat, signature: Signature) -> None:
        self._signatures[fmt] = signature

    def sniff(self, data: bytes) -> ImageFormat:
        for fmt, sig in self._signatures.items():
            if sig.matches(data):
                return fmt
        return ImageFormat.UNKNOWN

    def require(self, data: bytes) -> ImageFormat:
        """Like sniff(), but raise UnrecognizedFormat instead of returning UNKNOWN."""
        fmt = self.sniff(data)
        if fmt is ImageFormat.UNKNOWN:
            raise UnrecognizedFormat(describe_prefix(data, self.min_length))
        return fmt


def describe_prefix(data: bytes, min_length: int = 2) -> str:
    if len(data) < min_length:
        return f"Image data too short: {len(data)} bytes"
    if len(data) >= 4:
        magic = int.from_bytes(data[:4], "big")
        return f"Unknown magic number: 0x{magic:08x}"
    return f"Unknown magic bytes: {bytes(data[:4]).hex()}"


_DEFAULT_SNIFFER = FormatSniffer()


def sniff(data: bytes) -> ImageFormat:
    """Classify `data` using the built-in JPEG and PNG signatures."""
    return _DEFAULT_SNIFFER.sniff(data)
