"""
EXIF orientation values and the phone-photo orientation heuristic.
"""

import logging
from enum import IntEnum

logger = logging.getLogger(__name__)

# Aspect ratio window for 4:3 phone captures (e.g. 4080x3060 = 1.33)
PHONE_ASPECT_MIN = 1.3
PHONE_ASPECT_MAX = 1.4


class Orientation(IntEnum):
    """EXIF orientation tag values.

    Names describe the stored pixel grid relative to the intended display.
    """

    NORMAL = 1
    MIRROR_HORIZONTAL = 2
    ROTATE_180 = 3
    MIRROR_VERTICAL = 4
    TRANSPOSE = 5  # Mirror horizontal, then rotate 270 CW
    ROTATE_90_CW = 6
    TRANSVERSE = 7  # Mirror horizontal, then rotate 90 CW
    ROTATE_270_CW = 8

    @classmethod
    def from_tag(cls, value: int | None) -> "Orientation":
        """Map a raw tag value to an Orientation, defaulting to NORMAL."""
        if value is None:
            return cls.NORMAL
        try:
            return cls(value)
        except ValueError:
            logger.debug(f"Ignoring out-of-range orientation value {value}")
            return cls.NORMAL

    @property
    def swaps_axes(self) -> bool:
        """True if displaying the image exchanges width and height."""
        return self in (
            Orientation.TRANSPOSE,
            Orientation.ROTATE_90_CW,
            Orientation.TRANSVERSE,
            Orientation.ROTATE_270_CW,
        )


def correct_orientation(
    orientation: Orientation | int,
    raw_width: int,
    raw_height: int,
) -> Orientation:
    """Guess a rotation for untagged phone photos stored sideways.

    Best-effort only: a landscape 4:3 image with no orientation tag is
    assumed to be a portrait phone photo and rotated 90 degrees clockwise.
    Genuine landscape 4:3 photos without EXIF will be rotated too.

    Args:
        orientation: Orientation read from the file
        raw_width: Decoded pixel width before rotation
        raw_height: Decoded pixel height before rotation

    Returns:
        Orientation to apply
    """
    orientation = Orientation.from_tag(int(orientation))

    if orientation != Orientation.NORMAL or raw_height <= 0 or raw_width <= raw_height:
        return orientation

    aspect = raw_width / raw_height
    if PHONE_ASPECT_MIN <= aspect <= PHONE_ASPECT_MAX:
        logger.debug(
            f"Untagged {raw_width}x{raw_height} landscape image (ratio {aspect:.2f}), "
            "assuming sideways portrait"
        )
        return Orientation.ROTATE_90_CW

    return orientation
