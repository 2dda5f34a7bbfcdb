"""
Page layout: page size selection, fit-to-page scaling and centering.
"""

from dataclasses import dataclass
from enum import Enum


class PageSize(Enum):
    """Supported paper sizes as (width, height) in points, portrait."""

    A4 = (595.0, 842.0)

    @property
    def portrait(self) -> tuple[float, float]:
        return self.value

    @property
    def landscape(self) -> tuple[float, float]:
        return self.value[1], self.value[0]


@dataclass(frozen=True)
class PageGeometry:
    """Page dimensions and where the image is drawn on it, in points."""

    page_width: float
    page_height: float
    x: float
    y: float
    width: float
    height: float

    @property
    def is_portrait(self) -> bool:
        return self.page_height > self.page_width


def layout_page(
    bitmap_width: int,
    bitmap_height: int,
    margin_pt: float = 20.0,
    page_size: PageSize = PageSize.A4,
    allow_upscale: bool = True,
) -> PageGeometry:
    """Choose a page for a finished bitmap and fit the bitmap onto it.

    The page orientation follows the final, already-rotated bitmap: a
    portrait bitmap gets a portrait page, anything else landscape.

    Args:
        bitmap_width: Width of the composited bitmap in pixels
        bitmap_height: Height of the composited bitmap in pixels
        margin_pt: Margin on every side
        page_size: Paper size family
        allow_upscale: Let small bitmaps grow to fill the drawable area

    Returns:
        PageGeometry with the image centered inside the margins
    """
    if bitmap_width <= 0 or bitmap_height <= 0:
        raise ValueError(f"Bitmap must be non-empty, got {bitmap_width}x{bitmap_height}")

    if bitmap_height > bitmap_width:
        page_width, page_height = page_size.portrait
    else:
        page_width, page_height = page_size.landscape

    drawable_width = page_width - 2 * margin_pt
    drawable_height = page_height - 2 * margin_pt
    if drawable_width <= 0 or drawable_height <= 0:
        raise ValueError(f"Margin {margin_pt}pt leaves no drawable area on {page_size.name}")

    scale = min(drawable_width / bitmap_width, drawable_height / bitmap_height)
    if not allow_upscale:
        scale = min(scale, 1.0)

    # Clamp so float rounding can never push the image past the margins
    width = min(bitmap_width * scale, drawable_width)
    height = min(bitmap_height * scale, drawable_height)

    return PageGeometry(
        page_width=page_width,
        page_height=page_height,
        x=(drawable_width - width) / 2 + margin_pt,
        y=(drawable_height - height) / 2 + margin_pt,
        width=width,
        height=height,
    )
