"""
Pytest fixtures: synthetic JPEG/PNG files and hand-built EXIF segments.
"""

import io
import struct

import pytest
from PIL import Image


def tiff_block(orientation: int | None, byteorder: str = "little", extra_entries: int = 0) -> bytes:
    """Build a TIFF header plus IFD0 holding an optional Orientation entry."""
    fmt = "<" if byteorder == "little" else ">"
    header = (b"II" if byteorder == "little" else b"MM") + struct.pack(fmt + "HI", 42, 8)

    entries = []
    for i in range(extra_entries):
        # ImageWidth-style LONG entries ahead of the orientation tag
        entries.append(struct.pack(fmt + "HHII", 0x0100 + i, 4, 1, 640))
    if orientation is not None:
        entries.append(struct.pack(fmt + "HHIHH", 0x0112, 3, 1, orientation, 0))

    ifd = struct.pack(fmt + "H", len(entries)) + b"".join(entries) + struct.pack(fmt + "I", 0)
    return header + ifd


def segment(marker: int, payload: bytes) -> bytes:
    """A JPEG marker segment with its big-endian length field."""
    return bytes([0xFF, marker]) + struct.pack(">H", len(payload) + 2) + payload


def exif_segment(orientation: int | None, byteorder: str = "little", extra_entries: int = 0) -> bytes:
    return segment(0xE1, b"Exif\x00\x00" + tiff_block(orientation, byteorder, extra_entries))


def jpeg_stream(*segments: bytes) -> bytes:
    """SOI + segments + a stub scan + EOI; enough for the marker walker."""
    scan = segment(0xDA, b"\x00" * 10) + b"\x12\x34\x56"
    return b"\xff\xd8" + b"".join(segments) + scan + b"\xff\xd9"


def quadrant_image(width: int = 40, height: int = 20) -> Image.Image:
    """RGB image with distinct solid colors in each quadrant.

    Top-left red, top-right green, bottom-left blue, bottom-right white.
    """
    img = Image.new("RGB", (width, height))
    half_w, half_h = width // 2, height // 2
    img.paste((255, 0, 0), (0, 0, half_w, half_h))
    img.paste((0, 255, 0), (half_w, 0, width, half_h))
    img.paste((0, 0, 255), (0, half_h, half_w, height))
    img.paste((255, 255, 255), (half_w, half_h, width, height))
    return img


@pytest.fixture
def make_jpeg(tmp_path):
    """Factory writing a real JPEG, optionally with an EXIF orientation tag."""

    def _make(
        name: str = "photo.jpg",
        size: tuple[int, int] = (400, 300),
        orientation: int | None = None,
        byteorder: str = "little",
    ):
        buffer = io.BytesIO()
        Image.new("RGB", size, (120, 90, 60)).save(buffer, "JPEG", quality=80)
        data = buffer.getvalue()
        if orientation is not None:
            data = data[:2] + exif_segment(orientation, byteorder) + data[2:]

        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _make


@pytest.fixture
def make_png(tmp_path):
    """Factory writing a PNG in RGB, RGBA or palette mode."""

    def _make(name: str = "scan.png", size: tuple[int, int] = (300, 400), mode: str = "RGB"):
        path = tmp_path / name
        if mode == "RGBA":
            img = Image.new("RGBA", size, (10, 200, 30, 0))
        else:
            img = Image.new("RGB", size, (10, 200, 30)).convert(mode)
        img.save(path, "PNG")
        return path

    return _make


@pytest.fixture
def corrupt_file(tmp_path):
    """A .jpg file that no decoder recognizes."""
    path = tmp_path / "corrupt.jpg"
    path.write_bytes(b"this is not an image at all" * 20)
    return path
