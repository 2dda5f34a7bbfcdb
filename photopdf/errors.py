"""
Errors raised by the conversion pipeline.
"""

from pathlib import Path


class ConversionError(Exception):
    """Base class for conversion failures."""


class DecodeError(ConversionError):
    """An input file could not be read or no decoder recognized it."""

    def __init__(self, path: Path | str, message: str = "") -> None:
        self.path = Path(path)
        super().__init__(message or f"Could not decode image: {self.path}")


class NoValidImages(ConversionError):
    """Every input was skipped, so there is nothing to write."""

    def __init__(self, skipped: list | None = None) -> None:
        self.skipped = list(skipped or [])
        super().__init__(
            f"No valid images could be processed ({len(self.skipped)} skipped)"
        )


class EncodeError(ConversionError):
    """The finished document could not be saved."""

    def __init__(self, path: Path | str, message: str = "") -> None:
        self.path = Path(path)
        super().__init__(message or f"Could not save document: {self.path}")
