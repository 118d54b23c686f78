"""
measurer.py — Block Measurer.

Converts a captured bitmap into a document-space Block by scaling it to
the usable content width while preserving its aspect ratio.
"""

import logging
from dataclasses import dataclass, field

from report_compositor.errors import InvalidBitmapError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bitmap:
    """Raster output of one section capture."""
    pixel_width: int
    pixel_height: int
    pixels: bytes = field(default=b"", repr=False)  # PNG-encoded


@dataclass(frozen=True)
class Block:
    """One measured, non-splittable unit of content."""
    order: int
    source_id: str
    pixel_width: int
    pixel_height: int
    mm_height: float
    image: bytes = field(default=b"", repr=False, compare=False)


def scaled_height_mm(pixel_width: int, pixel_height: int, usable_width_mm: float) -> float:
    """Height in mm of a bitmap scaled to `usable_width_mm`."""
    if pixel_width <= 0:
        raise InvalidBitmapError(f"Bitmap width must be positive, got {pixel_width}")
    return pixel_height * (usable_width_mm / pixel_width)


def measure_block(
    bitmap: Bitmap,
    usable_width_mm: float,
    order: int,
    source_id: str,
) -> Block:
    """Measure a captured bitmap into a Block.

    Args:
        bitmap: Rasterizer output.
        usable_width_mm: Content width the bitmap is scaled to.
        order: 0-based position of the section in the export.
        source_id: Identifier of the captured section.

    Returns:
        Immutable Block carrying the derived mm height.

    Raises:
        InvalidBitmapError: If the bitmap has zero or negative width.
    """
    try:
        mm_height = scaled_height_mm(bitmap.pixel_width, bitmap.pixel_height, usable_width_mm)
    except InvalidBitmapError as exc:
        raise InvalidBitmapError(f"Section '{source_id}': {exc}") from exc

    block = Block(
        order=order,
        source_id=source_id,
        pixel_width=bitmap.pixel_width,
        pixel_height=bitmap.pixel_height,
        mm_height=mm_height,
        image=bitmap.pixels,
    )
    logger.debug(
        "Measured %s: %dx%d px -> %.1f mm tall",
        source_id, bitmap.pixel_width, bitmap.pixel_height, mm_height,
    )
    return block
