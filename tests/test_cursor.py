"""
imgsize ByteCursor and FormatSniffer Test Suite

Tests the primitives every parser is built on:
1. Big/little-endian reads
2. Bounds checking without partial consumption
3. Lookahead and search
4. Signature sniffing
"""

import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from imgsize import ByteCursor, ImageFormat, sniff
from imgsize.errors import TruncatedData, UnexpectedEof, UnrecognizedFormat
from imgsize.sniffer import FormatSniffer, Signature, PNG_SIGNATURE


# ============================================================================
# 1. Reads
# ============================================================================

def test_reads_advance_position():
    cursor = ByteCursor(bytes.fromhex("01 0203 0405 06070809 aabb"))
    assert cursor.read_u8() == 0x01
    assert cursor.read_u16_be() == 0x0203
    assert cursor.read_u16_le() == 0x0504
    assert cursor.read_u32_be() == 0x06070809
    assert cursor.position == 9
    assert cursor.take(2) == b"\xaa\xbb"
    assert cursor.at_end
    assert cursor.remaining == 0


def test_skip():
    cursor = ByteCursor(b"abcdef")
    cursor.skip(4)
    assert cursor.take(2) == b"ef"


def test_zero_length_operations():
    cursor = ByteCursor(b"")
    assert cursor.take(0) == b""
    cursor.skip(0)
    assert cursor.position == 0
    assert cursor.at_end


# ============================================================================
# 2. Bounds
# ============================================================================

@pytest.mark.parametrize("method,args", [
    ("read_u8", ()),
    ("read_u16_be", ()),
    ("read_u16_le", ()),
    ("read_u32_be", ()),
    ("take", (4,)),
    ("skip", (4,)),
    ("peek", (4,)),
])
def test_failed_read_keeps_position(method, args):
    cursor = ByteCursor(b"\x01\x02\x03\x04\x05")
    cursor.skip(4)
    if method == "read_u8":
        cursor.skip(1)
    with pytest.raises(UnexpectedEof):
        getattr(cursor, method)(*args)
    assert cursor.position == (5 if method == "read_u8" else 4)


def test_eof_error_reports_position():
    cursor = ByteCursor(b"\x00\x00\x00")
    cursor.skip(2)
    with pytest.raises(TruncatedData) as exc:
        cursor.read_u32_be()
    assert exc.value.position == 2


def test_negative_count():
    cursor = ByteCursor(b"abc")
    with pytest.raises(ValueError):
        cursor.take(-1)
    with pytest.raises(ValueError):
        cursor.skip(-1)


def test_seek_bounds():
    cursor = ByteCursor(b"abc")
    cursor.seek(3)
    assert cursor.at_end
    cursor.seek(0)
    assert cursor.read_u8() == ord("a")
    with pytest.raises(UnexpectedEof):
        cursor.seek(4)
    with pytest.raises(UnexpectedEof):
        cursor.seek(-1)
    assert cursor.position == 1


def test_buffer_is_not_modified():
    data = bytearray(b"\x10\x20\x30")
    cursor = ByteCursor(data)
    cursor.take(3)
    assert data == bytearray(b"\x10\x20\x30")


# ============================================================================
# 3. Lookahead
# ============================================================================

def test_peek_does_not_move():
    cursor = ByteCursor(b"\xff\xd8\xff")
    assert cursor.peek_u8() == 0xFF
    assert cursor.peek(2) == b"\xff\xd8"
    assert cursor.position == 0


def test_peek_at_end():
    cursor = ByteCursor(b"\x01")
    cursor.skip(1)
    with pytest.raises(UnexpectedEof):
        cursor.peek_u8()


def test_find():
    cursor = ByteCursor(b"\x00\xff\x00\xff")
    assert cursor.find(0xFF) == 1
    cursor.skip(2)
    assert cursor.find(0xFF) == 3
    cursor.skip(2)
    assert cursor.find(0xFF) is None


# ============================================================================
# 4. Sniffing
# ============================================================================

def test_sniff_known_formats():
    assert sniff(b"\xff\xd8\xff\xe0") is ImageFormat.JPEG
    assert sniff(b"\x89PNG\r\n\x1a\n\x00") is ImageFormat.PNG


@pytest.mark.parametrize("data", [
    b"",
    b"\xff",
    b"\x89PNG",
    b"\x89PNG\r\n\x1a",
    b"GIF89a",
    b"\xd8\xff",
])
def test_sniff_unknown(data):
    assert sniff(data) is ImageFormat.UNKNOWN


def test_require_reports_magic():
    with pytest.raises(UnrecognizedFormat, match="0x47494638"):
        FormatSniffer().require(b"GIF89a")


def test_require_reports_short_input():
    with pytest.raises(UnrecognizedFormat, match="too short: 1 bytes"):
        FormatSniffer().require(b"\x89")


def test_signature_offset():
    sig = Signature(4, b"ftyp", "ISO base media")
    assert sig.matches(b"\x00\x00\x00\x18ftypavif")
    assert not sig.matches(b"ftyp")
    assert PNG_SIGNATURE.end == 8


def test_custom_signature_table():
    sniffer = FormatSniffer(signatures={})
    assert sniffer.sniff(b"\xff\xd8") is ImageFormat.UNKNOWN
    sniffer.add(ImageFormat.JPEG, Signature(0, b"\xff\xd8"))
    assert sniffer.sniff(b"\xff\xd8") is ImageFormat.JPEG
    assert sniffer.min_length == 2


@pytest.mark.parametrize("wrap", [bytearray, memoryview])
def test_find_on_buffer_types(wrap):
    cursor = ByteCursor(wrap(b"\x00\x00\xff\xd9"))
    assert cursor.find(0xFF) == 2
    assert cursor.peek(2) == b"\x00\x00"
