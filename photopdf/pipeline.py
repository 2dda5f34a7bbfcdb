"""
Conversion pipeline: images in, one paginated PDF out.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

from .compositor import composite
from .config import PipelineConfig
from .errors import NoValidImages
from .exif import read_orientation
from .layout import PageGeometry, layout_page
from .loader import load_bounded
from .orientation import Orientation, correct_orientation
from .progress import ProgressReporter
from .writer import PdfDocumentWriter, encode_bitmap

logger = logging.getLogger(__name__)


class ImageStage(Enum):
    """Where an image is in its conversion."""

    LOADING = "loading"
    DECODING = "decoding"
    COMPOSITING = "compositing"
    PAGE_BUILDING = "page_building"
    EMBEDDING = "embedding"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SkippedImage:
    """An input that could not be turned into a page."""

    path: Path
    reason: str  # Exception class name, e.g. "DecodeError"
    detail: str = ""
    stage: ImageStage = ImageStage.FAILED


@dataclass
class ConversionResult:
    """Result of converting a batch of images."""

    output_path: Path
    pages: list[PageGeometry] = field(default_factory=list)
    skipped: list[SkippedImage] = field(default_factory=list)

    @property
    def embedded_count(self) -> int:
        return len(self.pages)

    def to_dict(self) -> dict:
        """Summary in a JSON-friendly shape."""
        return {
            "output_path": str(self.output_path),
            "embedded_count": self.embedded_count,
            "skipped": [{"path": str(s.path), "reason": s.reason} for s in self.skipped],
        }


@dataclass
class _ImageJob:
    path: Path
    stage: ImageStage = ImageStage.LOADING
    orientation: Orientation = Orientation.NORMAL


class ConversionPipeline:
    """Converts an ordered list of images into a single PDF.

    Images are processed strictly in order, one at a time. A failure on one
    image rolls back its page and moves on; the batch only fails if no
    image could be embedded or the final save fails.

    Each instance owns its document for the duration of ``convert``; use a
    separate instance per concurrent conversion.

    Usage:
        pipeline = ConversionPipeline(PipelineConfig(margin_pt=10))
        result = pipeline.convert(["a.jpg", "b.png"], "out.pdf")
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        writer_factory: Callable[[], PdfDocumentWriter] = PdfDocumentWriter,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Pipeline configuration (defaults if omitted)
            writer_factory: Builds the document writer for each conversion
        """
        self.config = config or PipelineConfig()
        self.writer_factory = writer_factory
        self._setup_logging()

    def _setup_logging(self) -> None:
        """Install a basic logging config unless the caller already has one."""
        if not logging.root.handlers:
            logging.basicConfig(
                level=logging.INFO,
                format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )

    def convert(
        self,
        image_paths: Iterable[Path | str | None],
        output_path: Path | str,
    ) -> ConversionResult:
        """Convert images into one PDF at ``output_path``.

        Args:
            image_paths: Images in page order; blank entries are ignored
            output_path: Destination PDF

        Returns:
            ConversionResult with one PageGeometry per embedded image

        Raises:
            ValueError: If no image paths were given
            NoValidImages: If every image was skipped (nothing is written)
            EncodeError: If the finished document could not be saved
        """
        paths = [Path(p) for p in image_paths if p is not None and str(p).strip()]
        if not paths:
            raise ValueError("At least one image path is required")

        result = ConversionResult(output_path=Path(output_path))
        progress = ProgressReporter(len(paths)) if self.config.show_progress else None

        writer = self.writer_factory()
        try:
            writer.begin_document()

            for path in paths:
                job = _ImageJob(path)
                pages_before = writer.page_count
                try:
                    geometry = self._convert_image(writer, job)
                except Exception as e:
                    failed_stage = job.stage
                    job.stage = ImageStage.FAILED
                    if writer.page_count > pages_before:
                        writer.remove_last_page()
                    logger.warning(f"Skipping {path.name}: {failed_stage.value} failed: {e}")
                    logger.debug(f"Traceback for {path}", exc_info=True)
                    result.skipped.append(
                        SkippedImage(path, type(e).__name__, str(e), failed_stage)
                    )
                    if progress:
                        progress.update(success=False, item_name=path.name)
                    continue

                result.pages.append(geometry)
                if progress:
                    progress.update(success=True, item_name=path.name)

            if progress:
                progress.finish()

            if writer.page_count == 0:
                logger.error(f"No valid images could be processed ({len(result.skipped)} skipped)")
                raise NoValidImages(result.skipped)

            writer.save(result.output_path)
        finally:
            writer.close()

        logger.info(
            f"Converted {result.embedded_count}/{len(paths)} images to {result.output_path}"
        )
        return result

    def _convert_image(self, writer: PdfDocumentWriter, job: _ImageJob) -> PageGeometry:
        """Run one image through load, composite, layout and embed."""
        config = self.config

        job.stage = ImageStage.LOADING
        job.orientation = read_orientation(job.path)

        job.stage = ImageStage.DECODING
        raw = load_bounded(job.path, config.max_edge_pixels)
        try:
            job.stage = ImageStage.COMPOSITING
            orientation = job.orientation
            if config.phone_portrait_heuristic:
                orientation = correct_orientation(orientation, raw.width, raw.height)
            logger.debug(
                f"{job.path.name}: {raw.width}x{raw.height}, "
                f"tag {job.orientation.name}, applying {orientation.name}"
            )
            bitmap = composite(raw, orientation, config.max_edge_pixels)
        finally:
            raw.close()

        try:
            # Page orientation comes from the composited bitmap only
            job.stage = ImageStage.PAGE_BUILDING
            geometry = layout_page(
                bitmap.width,
                bitmap.height,
                margin_pt=config.margin_pt,
                page_size=config.page,
                allow_upscale=config.allow_upscale,
            )
            page = writer.add_page(geometry.page_width, geometry.page_height)

            job.stage = ImageStage.EMBEDDING
            encoded = encode_bitmap(bitmap, config.jpeg_quality_percent)
            try:
                writer.draw_bitmap(
                    page, encoded.data, geometry.x, geometry.y, geometry.width, geometry.height
                )
            except (RuntimeError, ValueError) as e:
                if encoded.lossless:
                    raise
                logger.warning(f"{job.path.name}: JPEG embed failed, retrying lossless: {e}")
                encoded = encode_bitmap(bitmap, lossless=True)
                writer.draw_bitmap(
                    page, encoded.data, geometry.x, geometry.y, geometry.width, geometry.height
                )
        finally:
            bitmap.close()

        job.stage = ImageStage.DONE
        return geometry


def images_to_pdf(
    image_paths: Iterable[Path | str | None],
    output_path: Path | str,
    config: PipelineConfig | None = None,
) -> ConversionResult:
    """Convert several images into one PDF with a fresh pipeline."""
    return ConversionPipeline(config).convert(image_paths, output_path)


def image_to_pdf(
    image_path: Path | str,
    output_path: Path | str,
    config: PipelineConfig | None = None,
) -> ConversionResult:
    """Convert a single image into a one-page PDF."""
    return images_to_pdf([image_path], output_path, config)
