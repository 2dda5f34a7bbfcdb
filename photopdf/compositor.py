"""
Orientation and scale compositing.

Rotation, mirroring and downscaling are folded into one affine map and
resampled once with bilinear interpolation, so a rotated page never
pays for two rounds of interpolation error.
"""

import logging

from PIL import Image

from .orientation import Orientation

logger = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255)

Affine = tuple[float, float, float, float, float, float]


def target_size(width: int, height: int, max_edge: int) -> tuple[int, int]:
    """Pre-rotation size that fits within ``max_edge`` on both axes.

    Only scales down; aspect ratio is preserved.
    """
    if width <= max_edge and height <= max_edge:
        return width, height

    scale = max_edge / width if width > height else max_edge / height
    return max(1, int(width * scale)), max(1, int(height * scale))


def flatten_to_rgb(img: Image.Image) -> Image.Image:
    """Return an opaque RGB copy, with any alpha composited onto white."""
    if img.mode == "RGB":
        return img

    if "A" in img.mode or "transparency" in img.info:
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, BACKGROUND)
        background.paste(rgba, mask=rgba.getchannel("A"))
        rgba.close()
        return background

    return img.convert("RGB")


def inverse_affine(
    orientation: Orientation,
    source_size: tuple[int, int],
    target: tuple[int, int],
) -> Affine:
    """Output-to-source affine coefficients for Pillow's AFFINE transform.

    The forward map scales the source to ``target`` and then applies the
    orientation, translating so the result lands inside the output box.
    Pillow wants the inverse: for output (X, Y) it samples source
    (a*X + b*Y + c, d*X + e*Y + f).
    """
    width, height = source_size
    sx = target[0] / width
    sy = target[1] / height
    out_w, out_h = (target[1], target[0]) if orientation.swaps_axes else target

    if orientation == Orientation.MIRROR_HORIZONTAL:
        return (-1 / sx, 0.0, out_w / sx, 0.0, 1 / sy, 0.0)
    if orientation == Orientation.ROTATE_180:
        return (-1 / sx, 0.0, out_w / sx, 0.0, -1 / sy, out_h / sy)
    if orientation == Orientation.MIRROR_VERTICAL:
        return (1 / sx, 0.0, 0.0, 0.0, -1 / sy, out_h / sy)
    if orientation == Orientation.TRANSPOSE:
        return (0.0, 1 / sx, 0.0, 1 / sy, 0.0, 0.0)
    if orientation == Orientation.ROTATE_90_CW:
        return (0.0, 1 / sx, 0.0, -1 / sy, 0.0, out_w / sy)
    if orientation == Orientation.TRANSVERSE:
        return (0.0, -1 / sx, out_h / sx, -1 / sy, 0.0, out_w / sy)
    if orientation == Orientation.ROTATE_270_CW:
        return (0.0, -1 / sx, out_h / sx, 1 / sy, 0.0, 0.0)
    return (1 / sx, 0.0, 0.0, 0.0, 1 / sy, 0.0)


def composite(
    bitmap: Image.Image,
    orientation: Orientation | int,
    max_edge: int = 2048,
) -> Image.Image:
    """Produce an upright, opaque RGB page bitmap.

    Args:
        bitmap: Decoded source image (raw, pre-rotation)
        orientation: EXIF orientation to undo
        max_edge: Longest edge allowed in the output

    Returns:
        New RGB image no larger than ``max_edge`` on either axis
    """
    orientation = Orientation.from_tag(int(orientation))
    target = target_size(bitmap.width, bitmap.height, max_edge)
    out_size = (target[1], target[0]) if orientation.swaps_axes else target

    coefficients = inverse_affine(orientation, bitmap.size, target)

    source = flatten_to_rgb(bitmap)
    try:
        result = source.transform(
            out_size,
            Image.Transform.AFFINE,
            coefficients,
            resample=Image.Resampling.BILINEAR,
            fillcolor=BACKGROUND,
        )
    finally:
        if source is not bitmap:
            source.close()

    logger.debug(
        f"Composited {bitmap.width}x{bitmap.height} "
        f"({orientation.name}) -> {result.width}x{result.height}"
    )
    return result
