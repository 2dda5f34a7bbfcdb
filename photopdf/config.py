"""
Configuration for the image-to-PDF conversion pipeline.
"""

from dataclasses import dataclass
from typing import Literal

from .layout import PageSize


@dataclass
class PipelineConfig:
    """Configuration for converting images into a paginated PDF.

    Attributes:
        max_edge_pixels: Longest edge allowed for a composited page bitmap
        jpeg_quality: Lossy re-encode quality in (0, 1]
        margin_pt: Blank border around each image, in points
        page_size: Paper size family (portrait or landscape chosen per image)

        # Orientation
        phone_portrait_heuristic: Rotate untagged 4:3 landscape photos to portrait

        # Layout
        allow_upscale: Stretch small images to fill the page

        # Output
        show_progress: Render a progress line while converting
    """

    max_edge_pixels: int = 2048
    jpeg_quality: float = 0.85
    margin_pt: float = 20.0
    page_size: Literal["A4"] = "A4"

    # Orientation
    phone_portrait_heuristic: bool = True

    # Layout
    allow_upscale: bool = True

    # Output
    show_progress: bool = False

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.max_edge_pixels < 1:
            raise ValueError(f"max_edge_pixels must be >= 1, got {self.max_edge_pixels}")

        if not 0 < self.jpeg_quality <= 1:
            raise ValueError(f"jpeg_quality must be in (0, 1], got {self.jpeg_quality}")

        valid_sizes = {size.name for size in PageSize}
        if self.page_size not in valid_sizes:
            raise ValueError(f"Invalid page_size: {self.page_size!r}. Valid: {valid_sizes}")

        short_side = min(self.page.portrait)
        if self.margin_pt < 0 or 2 * self.margin_pt >= short_side:
            raise ValueError(
                f"margin_pt must be in [0, {short_side / 2}), got {self.margin_pt}"
            )

    @property
    def page(self) -> PageSize:
        """Page size enum member for this configuration."""
        return PageSize[self.page_size]

    @property
    def jpeg_quality_percent(self) -> int:
        """Quality on Pillow's 1-95 JPEG scale."""
        return max(1, min(95, round(self.jpeg_quality * 100)))
