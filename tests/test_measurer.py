"""
test_measurer.py — Unit tests for the block measurer.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from report_compositor.errors import InvalidBitmapError
from report_compositor.measurer import Bitmap, measure_block, scaled_height_mm


class TestScaledHeight:

    def test_aspect_preserved(self):
        # 1860 px wide scaled to 186 mm -> 0.1 mm per px
        assert scaled_height_mm(1860, 900, 186) == pytest.approx(90)

    def test_square_bitmap(self):
        assert scaled_height_mm(500, 500, 186) == pytest.approx(186)

    def test_zero_height_is_allowed(self):
        assert scaled_height_mm(100, 0, 186) == 0

    @pytest.mark.parametrize("width", [0, -10])
    def test_non_positive_width_raises(self, width):
        with pytest.raises(InvalidBitmapError):
            scaled_height_mm(width, 100, 186)


class TestMeasureBlock:

    def test_block_fields(self):
        bitmap = Bitmap(pixel_width=1200, pixel_height=600, pixels=b"png")
        block = measure_block(bitmap, usable_width_mm=186, order=3, source_id="traffic")
        assert block.order == 3
        assert block.source_id == "traffic"
        assert block.pixel_width == 1200
        assert block.pixel_height == 600
        assert block.mm_height == pytest.approx(93)
        assert block.image == b"png"

    def test_invalid_bitmap_names_section(self):
        with pytest.raises(InvalidBitmapError, match="ranking"):
            measure_block(Bitmap(0, 10), usable_width_mm=186, order=0, source_id="ranking")

    def test_block_is_immutable(self):
        block = measure_block(Bitmap(10, 10), usable_width_mm=186, order=0, source_id="x")
        with pytest.raises(AttributeError):
            block.mm_height = 1.0
