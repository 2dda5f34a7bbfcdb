"""Tests for the command-line interface."""

import fitz

from conftest import exif_segment, jpeg_stream
from photopdf.cli import main


class TestConvertCommand:
    """Tests for `photopdf convert`."""

    def test_convert(self, make_jpeg, make_png, tmp_path, capsys):
        output = tmp_path / "album.pdf"
        code = main(["convert", str(make_jpeg()), str(make_png()), "-o", str(output), "-q"])

        assert code == 0
        assert "2 pages written" in capsys.readouterr().out
        with fitz.open(output) as doc:
            assert doc.page_count == 2

    def test_reports_skipped(self, make_png, corrupt_file, tmp_path, capsys):
        output = tmp_path / "out.pdf"
        code = main(["convert", str(corrupt_file), str(make_png()), "-o", str(output), "-q"])

        assert code == 0
        assert "skipped" in capsys.readouterr().out

    def test_no_valid_images(self, corrupt_file, tmp_path, capsys):
        output = tmp_path / "out.pdf"
        code = main(["convert", str(corrupt_file), "-o", str(output), "-q"])

        assert code == 1
        assert "Failed" in capsys.readouterr().err
        assert not output.exists()

    def test_invalid_option(self, make_png, tmp_path):
        code = main(["convert", str(make_png()), "-o", str(tmp_path / "o.pdf"), "--quality", "2"])
        assert code == 2

    def test_blank_input_path(self, tmp_path, capsys):
        """A blank image argument is a usage error, not a traceback."""
        output = tmp_path / "out.pdf"
        code = main(["convert", " ", "-o", str(output), "-q"])

        assert code == 2
        assert "Invalid input" in capsys.readouterr().err
        assert not output.exists()


class TestOrientationCommand:
    """Tests for `photopdf orientation`."""

    def test_prints_orientation(self, tmp_path, capsys):
        path = tmp_path / "tagged.jpg"
        path.write_bytes(jpeg_stream(exif_segment(6)))

        assert main(["orientation", str(path)]) == 0
        assert "6 (ROTATE_90_CW)" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["orientation", str(tmp_path / "nope.jpg")]) == 1
        assert "not found" in capsys.readouterr().err
