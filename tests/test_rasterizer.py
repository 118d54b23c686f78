"""
test_rasterizer.py — Unit tests for matplotlib figure capture.
"""

import asyncio
import sys
from pathlib import Path

import pytest
from matplotlib.figure import Figure

sys.path.insert(0, str(Path(__file__).parent.parent))

from report_compositor.errors import CaptureError
from report_compositor.rasterizer import FigureRasterizer
from report_compositor.surface import Section


def _figure() -> Figure:
    fig = Figure(figsize=(4, 2))
    ax = fig.subplots()
    ax.plot([0, 1, 2], [3, 1, 2])
    return fig


class TestFigureRasterizer:

    def test_capture_returns_png_bitmap(self):
        bitmap = asyncio.run(FigureRasterizer(dpi=100).capture(Section("chart", _figure())))
        assert bitmap.pixels.startswith(b"\x89PNG")
        assert bitmap.pixel_width > 0
        assert bitmap.pixel_height > 0

    def test_higher_dpi_gives_larger_bitmap(self):
        low = asyncio.run(FigureRasterizer(dpi=50).capture(Section("c", _figure())))
        high = asyncio.run(FigureRasterizer(dpi=100).capture(Section("c", _figure())))
        assert high.pixel_width > low.pixel_width

    def test_detached_section_raises(self):
        with pytest.raises(CaptureError, match="detached"):
            asyncio.run(FigureRasterizer().capture(Section("detached", None)))

    def test_render_failure_wrapped(self):
        class Broken(Figure):
            def savefig(self, *args, **kwargs):
                raise ValueError("tainted canvas")

        with pytest.raises(CaptureError) as info:
            asyncio.run(FigureRasterizer().capture(Section("broken", Broken())))
        assert info.value.section_id == "broken"
        assert "tainted canvas" in str(info.value)
