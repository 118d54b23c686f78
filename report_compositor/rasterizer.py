"""
rasterizer.py — Section capture.

`FigureRasterizer` renders a section's matplotlib figure to a PNG byte
stream at a fixed DPI. No temp files are written; everything passes
through BytesIO.
"""

import asyncio
import io
import logging
from typing import Protocol

import matplotlib
matplotlib.use("Agg")  # non-interactive backend — no display needed
from PIL import Image as PILImage

from report_compositor.errors import CaptureError
from report_compositor.measurer import Bitmap
from report_compositor.surface import Section

logger = logging.getLogger(__name__)


class Rasterizer(Protocol):
    """Turns one live section into a bitmap."""

    async def capture(self, section: Section) -> Bitmap:
        ...


class FigureRasterizer:
    """Rasterize matplotlib figures to PNG.

    Args:
        dpi: Device scale; 150 dpi is roughly 2x a 72 dpi screen.
        settle_delay_s: Pause before each capture so pending layout
            changes (e.g. the width overrides) take effect.
    """

    def __init__(self, dpi: int = 150, settle_delay_s: float = 0.0):
        self.dpi = dpi
        self.settle_delay_s = settle_delay_s

    async def capture(self, section: Section) -> Bitmap:
        if section.figure is None:
            raise CaptureError(section.section_id, "section has no figure attached")

        if self.settle_delay_s > 0:
            await asyncio.sleep(self.settle_delay_s)

        fig = section.figure
        buf = io.BytesIO()
        try:
            fig.savefig(buf, format="png", dpi=self.dpi, bbox_inches="tight",
                        facecolor=fig.get_facecolor())
            buf.seek(0)
            with PILImage.open(buf) as img:
                width, height = img.size
        except Exception as exc:
            raise CaptureError(section.section_id, str(exc)) from exc

        logger.debug("Captured %s at %d dpi: %dx%d px",
                     section.section_id, self.dpi, width, height)
        return Bitmap(pixel_width=width, pixel_height=height, pixels=buf.getvalue())
