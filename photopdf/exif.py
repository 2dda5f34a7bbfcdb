"""
EXIF orientation reader.

Walks JPEG marker segments by hand to find the APP1 Exif block and the
Orientation tag in IFD0, without going through a general metadata
library. Every read is bounds-checked: a failed step yields None and the
public entry point collapses that to the default orientation.
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO

from .orientation import Orientation

logger = logging.getLogger(__name__)

SOI = 0xD8  # Start of image
EOI = 0xD9  # End of image
SOS = 0xDA  # Start of scan
APP1 = 0xE1

EXIF_SIGNATURE = b"Exif\x00\x00"
ORIENTATION_TAG = 0x0112
IFD_ENTRY_SIZE = 12

BYTE_ORDERS = {b"MM": "big", b"II": "little"}


def read_orientation(source: bytes | bytearray | str | Path | BinaryIO) -> Orientation:
    """Read the EXIF orientation of a JPEG.

    Never raises: anything that is not a JPEG, has no Exif segment, or is
    malformed reports Orientation.NORMAL.

    Args:
        source: Raw bytes, a file path, or a binary stream positioned at
            the start of the image

    Returns:
        Orientation tag value (1-8)
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            value = _scan_markers(io.BytesIO(source))
        elif isinstance(source, (str, Path)):
            with open(source, "rb") as f:
                value = _scan_markers(f)
        else:
            value = _scan_markers(source)
    except OSError as e:
        logger.debug(f"Could not read EXIF from {source!r}: {e}")
        return Orientation.NORMAL

    return Orientation.from_tag(value)


def _read_exact(stream: BinaryIO, size: int) -> bytes | None:
    data = stream.read(size)
    if len(data) != size:
        return None
    return data


def _scan_markers(stream: BinaryIO) -> int | None:
    """Find the APP1 Exif payload and parse its orientation tag."""
    if _read_exact(stream, 2) != b"\xff\xd8":
        return None

    while True:
        header = _read_exact(stream, 2)
        if header is None or header[0] != 0xFF:
            return None

        marker = header[1]
        if marker in (SOI, EOI):
            continue
        if marker == SOS:
            # Entropy-coded data follows; Exif cannot appear after this
            return None

        length_bytes = _read_exact(stream, 2)
        if length_bytes is None:
            return None
        length = int.from_bytes(length_bytes, "big") - 2
        if length < 0:
            return None

        if marker == APP1:
            payload = _read_exact(stream, length)
            if payload is None:
                return None
            if payload[:6] == EXIF_SIGNATURE:
                return parse_orientation_tag(payload[6:])
            # XMP and other APP1 users share the marker; keep looking
            continue

        stream.seek(length, io.SEEK_CUR)


def _read_uint(data: bytes, offset: int, size: int, byteorder: str) -> int | None:
    if offset < 0 or offset + size > len(data):
        return None
    return int.from_bytes(data[offset:offset + size], byteorder)


def parse_orientation_tag(tiff: bytes) -> int | None:
    """Find the Orientation entry in IFD0 of a TIFF-structured Exif block.

    Args:
        tiff: Exif payload with the ``Exif\\0\\0`` signature stripped

    Returns:
        Raw tag value, or None if absent or unreadable
    """
    byteorder = BYTE_ORDERS.get(bytes(tiff[:2]))
    if byteorder is None:
        return None

    # Bytes 2-3 are the TIFF magic number
    ifd_offset = _read_uint(tiff, 4, 4, byteorder)
    if ifd_offset is None:
        return None

    entry_count = _read_uint(tiff, ifd_offset, 2, byteorder)
    if entry_count is None:
        return None

    first_entry = ifd_offset + 2
    if first_entry + entry_count * IFD_ENTRY_SIZE > len(tiff):
        logger.debug(f"IFD0 claims {entry_count} entries, buffer holds fewer")
        return None

    for index in range(entry_count):
        entry = first_entry + index * IFD_ENTRY_SIZE
        tag = _read_uint(tiff, entry, 2, byteorder)
        if tag == ORIENTATION_TAG:
            # SHORT value, left-justified in the 4-byte value field
            return _read_uint(tiff, entry + 8, 2, byteorder)

    return None
