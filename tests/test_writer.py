"""
test_writer.py — Unit tests for the ReportLab-backed document writer.

Tests cover:
    - Page cursor (new_page / set_page / page_count)
    - Command recording on revisited pages
    - PDF serialization and error wrapping
"""

import io
import sys
from pathlib import Path

import pytest
from PIL import Image as PILImage

sys.path.insert(0, str(Path(__file__).parent.parent))

from report_compositor.errors import SerializationError
from report_compositor.writer import DocumentWriter, TextStyle


def _png(width: int = 40, height: int = 20) -> bytes:
    buf = io.BytesIO()
    PILImage.new("RGB", (width, height), "white").save(buf, format="PNG")
    return buf.getvalue()


class TestPageCursor:

    def test_starts_empty(self):
        writer = DocumentWriter()
        assert writer.page_count == 0
        assert writer.current_page == 0

    def test_new_page_returns_number(self):
        writer = DocumentWriter()
        assert writer.new_page() == 1
        assert writer.new_page() == 2
        assert writer.page_count == 2
        assert writer.current_page == 2

    def test_set_page_targets_earlier_page(self):
        writer = DocumentWriter()
        writer.new_page()
        writer.new_page()
        writer.set_page(1)
        writer.draw_text("back on one", 10, 10)
        assert [c.args["text"] for c in writer.commands(1)] == ["back on one"]
        assert writer.commands(2) == []

    @pytest.mark.parametrize("n", [0, 3])
    def test_set_page_out_of_range(self, n):
        writer = DocumentWriter()
        writer.new_page()
        writer.new_page()
        with pytest.raises(IndexError):
            writer.set_page(n)

    def test_drawing_before_first_page_raises(self):
        with pytest.raises(RuntimeError):
            DocumentWriter().fill_rect(0, 0, 10, 10, "000000")


class TestSerialize:

    def test_produces_pdf(self):
        writer = DocumentWriter(title="Report")
        writer.new_page()
        writer.fill_rect(0, 0, 210, 297, "1F3864")
        writer.draw_text("Title", 105, 120, TextStyle("Helvetica-Bold", 26, "#FFFFFF", "center"))
        writer.new_page()
        writer.draw_image(_png(), 12, 22, 186, 93)
        writer.draw_line(12, 288, 198, 288, "1F3864")
        writer.draw_text("Page 2 of 2", 105, 293, TextStyle(align="center"))
        writer.draw_text("Confidential", 198, 293, TextStyle(align="right"))

        data = writer.serialize()
        assert data.startswith(b"%PDF")

    def test_no_pages_raises(self):
        with pytest.raises(SerializationError):
            DocumentWriter().serialize()

    def test_corrupt_image_raises_serialization_error(self):
        writer = DocumentWriter()
        writer.new_page()
        writer.draw_image(b"not an image", 0, 0, 10, 10)
        with pytest.raises(SerializationError):
            writer.serialize()

    def test_serialize_is_repeatable(self):
        writer = DocumentWriter()
        writer.new_page()
        writer.draw_text("x", 10, 10)
        assert writer.serialize().startswith(b"%PDF")
        assert writer.serialize().startswith(b"%PDF")
