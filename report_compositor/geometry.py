"""
geometry.py — Page geometry in millimetres.

A4 portrait with a header band at the top, a footer band at the bottom
and a fixed horizontal margin. All measurements are top-left origin.
"""

from dataclasses import dataclass
from typing import Any

A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0


@dataclass(frozen=True)
class PageGeometry:
    """Fixed page layout used by the measurer, packer and renderer."""
    page_width_mm: float = A4_WIDTH_MM
    page_height_mm: float = A4_HEIGHT_MM
    margin_x_mm: float = 12.0
    header_h_mm: float = 16.0
    footer_h_mm: float = 10.0
    gap_mm: float = 4.0
    content_top_margin_mm: float = 6.0

    @property
    def usable_width_mm(self) -> float:
        return self.page_width_mm - 2 * self.margin_x_mm

    @property
    def usable_height_mm(self) -> float:
        return (
            self.page_height_mm
            - self.header_h_mm
            - self.footer_h_mm
            - self.content_top_margin_mm
        )

    @property
    def header_bottom_mm(self) -> float:
        """Y of the first content line, below the header band."""
        return self.header_h_mm + self.content_top_margin_mm

    @property
    def footer_top_mm(self) -> float:
        return self.page_height_mm - self.footer_h_mm

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> "PageGeometry":
        """Build geometry from the `page` section of config.yaml.

        Missing keys keep their A4 defaults.
        """
        page = (cfg or {}).get("page", {}) or {}
        defaults = cls()
        return cls(
            page_width_mm=float(page.get("width_mm", defaults.page_width_mm)),
            page_height_mm=float(page.get("height_mm", defaults.page_height_mm)),
            margin_x_mm=float(page.get("margin_x_mm", defaults.margin_x_mm)),
            header_h_mm=float(page.get("header_h_mm", defaults.header_h_mm)),
            footer_h_mm=float(page.get("footer_h_mm", defaults.footer_h_mm)),
            gap_mm=float(page.get("gap_mm", defaults.gap_mm)),
            content_top_margin_mm=float(
                page.get("content_top_margin_mm", defaults.content_top_margin_mm)
            ),
        )
