"""
writer.py — Document Writer backed by ReportLab.

Draw commands are recorded per page in millimetres (top-left origin) and
only replayed onto a ReportLab canvas when `serialize()` is called. This
lets the renderer go back to an earlier page with `set_page()` once the
total page count is known, the same way a deferred "page X of Y" canvas
holds its page states until save.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Any

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from report_compositor.errors import SerializationError
from report_compositor.geometry import A4_HEIGHT_MM, A4_WIDTH_MM

logger = logging.getLogger(__name__)


def _hex(h: str):
    """Convert a hex colour string to ReportLab Color."""
    h = h.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return colors.Color(r / 255, g / 255, b / 255)


@dataclass(frozen=True)
class TextStyle:
    """Font, size, colour and horizontal anchor for a text run."""
    font_name: str = "Helvetica"
    font_size: float = 9
    color: str = "#000000"
    align: str = "left"  # 'left', 'center', 'right'


@dataclass(frozen=True)
class DrawCommand:
    """One recorded drawing operation."""
    kind: str  # 'image', 'text', 'rect', 'line'
    args: dict[str, Any] = field(default_factory=dict)


class DocumentWriter:
    """Page-addressable drawing surface producing PDF bytes."""

    def __init__(
        self,
        page_width_mm: float = A4_WIDTH_MM,
        page_height_mm: float = A4_HEIGHT_MM,
        title: str = "",
        author: str = "",
        subject: str = "",
    ):
        self.page_width_mm = page_width_mm
        self.page_height_mm = page_height_mm
        self.title = title
        self.author = author
        self.subject = subject
        self._pages: list[list[DrawCommand]] = []
        self._current = -1

    # ------------------------------------------------------------------
    # Page cursor
    # ------------------------------------------------------------------

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def current_page(self) -> int:
        """1-based number of the page being drawn on (0 before any page)."""
        return self._current + 1

    def new_page(self) -> int:
        """Append a blank page, make it current and return its 1-based number."""
        self._pages.append([])
        self._current = len(self._pages) - 1
        return self._current + 1

    def set_page(self, n: int) -> None:
        """Make existing page `n` (1-based) the drawing target."""
        if not 1 <= n <= len(self._pages):
            raise IndexError(f"Page {n} out of range (1..{len(self._pages)})")
        self._current = n - 1

    def commands(self, n: int) -> list[DrawCommand]:
        """Recorded commands for page `n` (1-based)."""
        return list(self._pages[n - 1])

    def _record(self, kind: str, **args: Any) -> None:
        if self._current < 0:
            raise RuntimeError("new_page() must be called before drawing")
        self._pages[self._current].append(DrawCommand(kind, args))

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw_image(self, data: bytes, x_mm: float, y_mm: float,
                   w_mm: float, h_mm: float) -> None:
        self._record("image", data=data, x=x_mm, y=y_mm, w=w_mm, h=h_mm)

    def draw_text(self, text: str, x_mm: float, y_mm: float,
                  style: TextStyle = TextStyle()) -> None:
        """Draw a single line; `y_mm` is the baseline."""
        self._record("text", text=text, x=x_mm, y=y_mm, style=style)

    def fill_rect(self, x_mm: float, y_mm: float, w_mm: float, h_mm: float,
                  color: str) -> None:
        self._record("rect", x=x_mm, y=y_mm, w=w_mm, h=h_mm, color=color)

    def draw_line(self, x1_mm: float, y1_mm: float, x2_mm: float, y2_mm: float,
                  color: str, width_pt: float = 0.5) -> None:
        self._record("line", x1=x1_mm, y1=y1_mm, x2=x2_mm, y2=y2_mm,
                     color=color, width=width_pt)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def _y(self, y_mm: float) -> float:
        """Top-left mm -> ReportLab bottom-left points."""
        return (self.page_height_mm - y_mm) * mm

    def _replay(self, c: canvas.Canvas, cmd: DrawCommand) -> None:
        a = cmd.args
        if cmd.kind == "rect":
            c.setFillColor(_hex(a["color"]))
            c.rect(a["x"] * mm, self._y(a["y"] + a["h"]), a["w"] * mm, a["h"] * mm,
                   fill=1, stroke=0)
        elif cmd.kind == "line":
            c.setStrokeColor(_hex(a["color"]))
            c.setLineWidth(a["width"])
            c.line(a["x1"] * mm, self._y(a["y1"]), a["x2"] * mm, self._y(a["y2"]))
        elif cmd.kind == "text":
            style: TextStyle = a["style"]
            c.setFont(style.font_name, style.font_size)
            c.setFillColor(_hex(style.color))
            x, y = a["x"] * mm, self._y(a["y"])
            if style.align == "center":
                c.drawCentredString(x, y, a["text"])
            elif style.align == "right":
                c.drawRightString(x, y, a["text"])
            else:
                c.drawString(x, y, a["text"])
        elif cmd.kind == "image":
            c.drawImage(ImageReader(io.BytesIO(a["data"])), a["x"] * mm,
                        self._y(a["y"] + a["h"]), a["w"] * mm, a["h"] * mm)
        else:
            raise ValueError(f"Unknown draw command: {cmd.kind}")

    def serialize(self) -> bytes:
        """Replay every recorded page onto a ReportLab canvas.

        Returns:
            The finished PDF document.

        Raises:
            SerializationError: If there are no pages or ReportLab fails.
        """
        if not self._pages:
            raise SerializationError("Document has no pages")

        buf = io.BytesIO()
        try:
            c = canvas.Canvas(buf, pagesize=(self.page_width_mm * mm,
                                             self.page_height_mm * mm))
            c.setTitle(self.title)
            c.setAuthor(self.author)
            c.setSubject(self.subject)
            c.setCreator("report-compositor")
            for page_cmds in self._pages:
                c.saveState()
                for cmd in page_cmds:
                    self._replay(c, cmd)
                c.restoreState()
                c.showPage()
            c.save()
        except Exception as exc:
            raise SerializationError(f"PDF serialization failed: {exc}") from exc

        data = buf.getvalue()
        logger.info("Serialized %d pages (%d bytes)", len(self._pages), len(data))
        return data
