"""Tests for bitmap encoding and the PyMuPDF document writer."""

import fitz
import pytest
from PIL import Image

from photopdf.errors import EncodeError
from photopdf.writer import PdfDocumentWriter, encode_bitmap


class TestEncodeBitmap:
    """Tests for lossy re-encoding with lossless fallback."""

    def test_jpeg_by_default(self):
        encoded = encode_bitmap(Image.new("RGB", (64, 48), (200, 10, 10)), quality=85)
        assert encoded.format == "JPEG"
        assert encoded.data[:2] == b"\xff\xd8"
        assert (encoded.width, encoded.height) == (64, 48)
        assert not encoded.lossless

    def test_falls_back_to_png(self, monkeypatch):
        """A failing JPEG encoder yields PNG bytes of the same bitmap."""
        original_save = Image.Image.save

        def failing_save(self, fp, format=None, **params):
            if format == "JPEG":
                raise OSError("encoder jpeg not available")
            return original_save(self, fp, format, **params)

        monkeypatch.setattr(Image.Image, "save", failing_save)
        encoded = encode_bitmap(Image.new("RGB", (8, 8)), quality=85)
        assert encoded.format == "PNG"
        assert encoded.data[:8] == b"\x89PNG\r\n\x1a\n"
        assert encoded.lossless

    def test_lossless_requested(self):
        encoded = encode_bitmap(Image.new("RGB", (16, 12), (0, 0, 255)), lossless=True)
        assert encoded.format == "PNG"
        assert encoded.data[:8] == b"\x89PNG\r\n\x1a\n"
        assert (encoded.width, encoded.height) == (16, 12)


class TestPdfDocumentWriter:
    """Tests for page management and saving."""

    def _jpeg(self) -> bytes:
        return encode_bitmap(Image.new("RGB", (30, 40), (0, 120, 0))).data

    def test_pages_in_order(self, tmp_path):
        output = tmp_path / "out.pdf"
        with PdfDocumentWriter() as writer:
            writer.begin_document()
            first = writer.add_page(595, 842)
            writer.draw_bitmap(first, self._jpeg(), 20, 20, 555, 740)
            second = writer.add_page(842, 595)
            writer.draw_bitmap(second, self._jpeg(), 20, 20, 100, 100)
            assert writer.page_count == 2
            writer.save(output)

        with fitz.open(output) as doc:
            assert doc.page_count == 2
            assert (doc[0].rect.width, doc[0].rect.height) == (595, 842)
            assert (doc[1].rect.width, doc[1].rect.height) == (842, 595)
            assert len(doc[0].get_images()) == 1

    def test_remove_last_page(self):
        with PdfDocumentWriter() as writer:
            writer.begin_document()
            writer.add_page(595, 842)
            writer.add_page(842, 595)
            writer.remove_last_page()
            assert writer.page_count == 1
            writer.remove_last_page()
            writer.remove_last_page()
            assert writer.page_count == 0

    def test_requires_begin_document(self):
        writer = PdfDocumentWriter()
        assert writer.page_count == 0
        with pytest.raises(RuntimeError):
            writer.add_page(595, 842)

    def test_failed_save_leaves_no_file(self, tmp_path):
        """Saving an empty document fails without leaving files behind."""
        output = tmp_path / "empty.pdf"
        with PdfDocumentWriter() as writer:
            writer.begin_document()
            with pytest.raises(EncodeError) as exc_info:
                writer.save(output)

        assert exc_info.value.path == output
        assert list(tmp_path.iterdir()) == []

    def test_save_into_unwritable_location(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with PdfDocumentWriter() as writer:
            writer.begin_document()
            writer.add_page(595, 842)
            with pytest.raises(EncodeError):
                writer.save(blocker / "out.pdf")

    def test_save_replaces_existing_file(self, tmp_path):
        output = tmp_path / "out.pdf"
        output.write_bytes(b"old contents")
        with PdfDocumentWriter() as writer:
            writer.begin_document()
            writer.add_page(595, 842)
            writer.save(output)

        assert output.read_bytes().startswith(b"%PDF")
        assert [p.name for p in tmp_path.iterdir()] == ["out.pdf"]
