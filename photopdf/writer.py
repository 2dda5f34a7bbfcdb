"""
PDF document writer built on PyMuPDF, plus page bitmap encoding.
"""

import io
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image

from .errors import EncodeError

logger = logging.getLogger(__name__)


@dataclass
class EncodedBitmap:
    """Compressed image bytes ready to embed in a page."""

    data: bytes
    format: str  # "JPEG" or "PNG"
    width: int
    height: int

    @property
    def lossless(self) -> bool:
        return self.format == "PNG"


def encode_bitmap(bitmap: Image.Image, quality: int = 85, lossless: bool = False) -> EncodedBitmap:
    """Re-encode a page bitmap as JPEG, falling back to lossless PNG.

    Args:
        bitmap: Opaque RGB page bitmap
        quality: JPEG quality on Pillow's 1-95 scale
        lossless: Skip JPEG and encode PNG directly

    Returns:
        EncodedBitmap holding the compressed bytes
    """
    if not lossless:
        buffer = io.BytesIO()
        try:
            bitmap.save(buffer, "JPEG", quality=quality, optimize=True)
            return EncodedBitmap(buffer.getvalue(), "JPEG", bitmap.width, bitmap.height)
        except (OSError, ValueError) as e:
            logger.warning(f"JPEG encode failed, embedding lossless instead: {e}")

    buffer = io.BytesIO()
    bitmap.save(buffer, "PNG")
    return EncodedBitmap(buffer.getvalue(), "PNG", bitmap.width, bitmap.height)


class PdfDocumentWriter:
    """Accumulates pages in an in-memory PDF and saves it atomically.

    Usage:
        with PdfDocumentWriter() as writer:
            writer.begin_document()
            page = writer.add_page(595, 842)
            writer.draw_bitmap(page, encoded.data, 20, 20, 555, 802)
            writer.save("out.pdf")
    """

    def __init__(self) -> None:
        self._doc: fitz.Document | None = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def document(self) -> fitz.Document:
        if self._doc is None:
            raise RuntimeError("begin_document() has not been called")
        return self._doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count if self._doc is not None else 0

    def begin_document(self) -> None:
        """Start a new, empty document."""
        self.close()
        self._doc = fitz.open()

    def add_page(self, width_pt: float, height_pt: float) -> fitz.Page:
        """Append a blank page and return it."""
        return self.document.new_page(width=width_pt, height=height_pt)

    def draw_bitmap(
        self,
        page: fitz.Page,
        data: bytes,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Place encoded image bytes in the given rectangle of a page."""
        page.insert_image(fitz.Rect(x, y, x + width, y + height), stream=data)

    def remove_last_page(self) -> None:
        """Drop the most recently added page, if any."""
        if self.page_count > 0:
            self.document.delete_page(-1)

    def save(self, path: Path | str) -> Path:
        """Write the document to ``path``.

        Writes to a temporary file beside the destination and moves it into
        place, so a failed save never leaves a half-written file behind.

        Raises:
            EncodeError: If the document could not be written
        """
        path = Path(path)
        tmp_path: Path | None = None

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}_", suffix=".pdf", dir=path.parent)
            os.close(fd)
            tmp_path = Path(tmp_name)

            self.document.save(str(tmp_path), garbage=3, deflate=True)
            os.replace(tmp_path, path)
        except (OSError, RuntimeError, ValueError) as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise EncodeError(path, f"Failed to save {path}: {e}") from e

        logger.info(f"PDF saved: {path} ({self.page_count} pages)")
        return path

    def close(self) -> None:
        """Release the document."""
        if self._doc is not None:
            self._doc.close()
            self._doc = None
