"""
photopdf - Convert photos into a single paginated PDF

A memory-bounded pipeline for:
1. Reading EXIF orientation straight from JPEG bytes
2. Decoding oversized photos at a reduced scale
3. Rotating pixels upright and scaling in a single resample
4. Fitting each image onto an A4 page chosen from its final shape
5. Writing all pages to one PDF, skipping images that fail
"""

__version__ = "1.0.0"
__author__ = "photopdf"

from .config import PipelineConfig
from .errors import ConversionError, DecodeError, EncodeError, NoValidImages
from .pipeline import ConversionPipeline, ConversionResult, image_to_pdf, images_to_pdf

__all__ = [
    "ConversionPipeline",
    "ConversionResult",
    "PipelineConfig",
    "ConversionError",
    "DecodeError",
    "EncodeError",
    "NoValidImages",
    "image_to_pdf",
    "images_to_pdf",
]
