"""
Memory-bounded image loading.

Pillow reads only the header on open, so the declared size is known
before any pixels are decoded. Oversized sources are decoded at a
reduced scale: JPEGs via the decoder's DCT scaling (``draft``) and a box
resize for any remainder, other formats by integer reduction immediately
after a full decode.
"""

import logging
import math
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError

logger = logging.getLogger(__name__)

REDUCIBLE_MODES = ("L", "LA", "RGB", "RGBA")


def _working_mode(img: Image.Image) -> str:
    if "A" in img.mode or "transparency" in img.info:
        return "RGBA"
    return "RGB"


def compute_subsampling(width: int, height: int, max_edge: int) -> int:
    """Integer stride that brings the source near ``max_edge``.

    Args:
        width: Declared source width
        height: Declared source height
        max_edge: Size ceiling for either axis

    Returns:
        Subsampling factor, at least 1
    """
    if max_edge < 1:
        raise ValueError(f"max_edge must be >= 1, got {max_edge}")
    return max(1, width // max_edge, height // max_edge)


def load_bounded(path: Path | str, max_edge: int = 2048) -> Image.Image:
    """Open and decode an image, subsampling oversized sources.

    The returned image is fully loaded and detached from the file. Its
    size may not be an exact ratio of the source size.

    Args:
        path: Image file to read
        max_edge: Size ceiling used to pick the subsampling factor

    Returns:
        Decoded image

    Raises:
        DecodeError: If the file is unreadable or no decoder recognizes it
    """
    path = Path(path)

    try:
        img = Image.open(path)
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeError(path, f"Unsupported image {path.name}: {e}") from e
    except OSError as e:
        raise DecodeError(path, f"Could not read {path.name}: {e}") from e

    width, height = img.size
    factor = compute_subsampling(width, height, max_edge)

    target = (math.ceil(width / factor), math.ceil(height / factor))

    try:
        if factor > 1:
            # Only JPEG honours draft, at 1/2, 1/4 or 1/8 and never below target
            img.draft(img.mode, target)

        img.load()

        if img.width > target[0] or img.height > target[1]:
            if img.mode not in REDUCIBLE_MODES:
                converted = img.convert(_working_mode(img))
                img.close()
                img = converted
            if img.size == (width, height):
                reduced = img.reduce(factor)
            else:
                # Draft stopped at a coarser power-of-two scale
                reduced = img.resize(target, Image.Resampling.BOX)
            img.close()
            img = reduced
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        img.close()
        raise DecodeError(path, f"Could not decode {path.name}: {e}") from e

    logger.debug(
        f"Loaded {path.name}: declared {width}x{height}, "
        f"subsampling {factor}, realized {img.width}x{img.height}"
    )
    return img
