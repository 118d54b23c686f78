"""
renderer.py — Page Renderer.

Two passes against a DocumentWriter:

    Pass 1: cover page, then every content page with its header band
            and the bitmaps of its placed blocks.
    Pass 2: once every page exists, revisit each content page and draw
            the footer band with "Page n of total".

The renderer holds no state between calls; everything it mutates lives
on the writer.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from report_compositor.geometry import PageGeometry
from report_compositor.packer import Page
from report_compositor.writer import DocumentWriter, TextStyle

logger = logging.getLogger(__name__)

DEFAULT_BRAND = {
    "primary": "1F3864",
    "accent": "2E75B6",
    "text": "222222",
    "muted": "7F7F7F",
    "cover_text": "CCE0F2",
}


@dataclass(frozen=True)
class ReportMetadata:
    """Descriptive fields printed on the cover, headers and footers."""
    title: str
    client_name: str = ""
    domain: str = ""
    period_label: str = ""
    subtitle: str = ""
    generated_at: datetime = field(default_factory=datetime.now)
    confidentiality: str = "Confidential"

    @property
    def date_label(self) -> str:
        return self.generated_at.strftime("%d %b %Y")


@dataclass(frozen=True)
class CoverSpec:
    """Text lines drawn on the cover page."""
    title: str
    subtitle: str
    period_line: str
    domain: str
    confidentiality: str

    @classmethod
    def from_metadata(cls, meta: ReportMetadata) -> "CoverSpec":
        parts = [p for p in (meta.period_label, f"Generated {meta.date_label}") if p]
        return cls(
            title=meta.title,
            subtitle=meta.subtitle or meta.client_name,
            period_line="   |   ".join(parts),
            domain=meta.domain,
            confidentiality=meta.confidentiality,
        )


@dataclass
class Document:
    """One export's worth of packed content plus its cover."""
    cover: CoverSpec
    content_pages: list[Page]
    metadata: ReportMetadata

    @property
    def total_pages(self) -> int:
        return len(self.content_pages) + 1


def build_document(pages: list[Page], metadata: ReportMetadata) -> Document:
    return Document(
        cover=CoverSpec.from_metadata(metadata),
        content_pages=pages,
        metadata=metadata,
    )


def _colour(brand: dict[str, Any], key: str) -> str:
    return brand.get(key, DEFAULT_BRAND[key])


# ---------------------------------------------------------------------------
# Pass 1
# ---------------------------------------------------------------------------

def render_cover(writer: DocumentWriter, cover: CoverSpec,
                 geo: PageGeometry, brand: dict[str, Any]) -> None:
    """Full-bleed cover: background, centred title block, period/date line."""
    cx = geo.page_width_mm / 2
    top = geo.page_height_mm * 0.38

    writer.fill_rect(0, 0, geo.page_width_mm, geo.page_height_mm, _colour(brand, "primary"))
    writer.fill_rect(cx - 30, top - 10, 60, 1.2, _colour(brand, "accent"))

    writer.draw_text(cover.title, cx, top + 6,
                     TextStyle("Helvetica-Bold", 26, "#FFFFFF", "center"))
    if cover.subtitle:
        writer.draw_text(cover.subtitle, cx, top + 18,
                         TextStyle("Helvetica", 14, _colour(brand, "cover_text"), "center"))
    if cover.period_line:
        writer.draw_text(cover.period_line, cx, top + 28,
                         TextStyle("Helvetica-Bold", 11, _colour(brand, "cover_text"), "center"))
    if cover.domain:
        writer.draw_text(cover.domain, cx, top + 37,
                         TextStyle("Helvetica", 10, _colour(brand, "cover_text"), "center"))
    writer.draw_text(cover.confidentiality.upper(), cx, geo.page_height_mm - 15,
                     TextStyle("Helvetica", 8, _colour(brand, "cover_text"), "center"))


def render_header(writer: DocumentWriter, meta: ReportMetadata,
                  geo: PageGeometry, brand: dict[str, Any]) -> None:
    """Header band: title and domain left, period and generation date right."""
    h = geo.header_h_mm
    right = geo.page_width_mm - geo.margin_x_mm
    writer.fill_rect(0, 0, geo.page_width_mm, h, _colour(brand, "primary"))

    writer.draw_text(meta.title, geo.margin_x_mm, h * 0.45,
                     TextStyle("Helvetica-Bold", 10, "#FFFFFF"))
    if meta.domain:
        writer.draw_text(meta.domain, geo.margin_x_mm, h * 0.8,
                         TextStyle("Helvetica", 8, _colour(brand, "cover_text")))
    if meta.period_label:
        writer.draw_text(meta.period_label, right, h * 0.45,
                         TextStyle("Helvetica", 9, "#FFFFFF", "right"))
    writer.draw_text(f"Generated {meta.date_label}", right, h * 0.8,
                     TextStyle("Helvetica", 8, _colour(brand, "cover_text"), "right"))


def render_content_page(writer: DocumentWriter, page: Page, meta: ReportMetadata,
                        geo: PageGeometry, brand: dict[str, Any]) -> None:
    render_header(writer, meta, geo, brand)
    for placement in page.placements:
        block = placement.block
        writer.draw_image(
            block.image,
            geo.margin_x_mm,
            geo.header_bottom_mm + placement.y_offset_mm,
            geo.usable_width_mm,
            block.mm_height,
        )


# ---------------------------------------------------------------------------
# Pass 2
# ---------------------------------------------------------------------------

def render_footer(writer: DocumentWriter, page_number: int, total_pages: int,
                  meta: ReportMetadata, geo: PageGeometry, brand: dict[str, Any]) -> None:
    """Footer band: date left, page count centred, confidentiality right."""
    top = geo.footer_top_mm
    baseline = top + geo.footer_h_mm * 0.6
    style = TextStyle("Helvetica", 7.5, _colour(brand, "muted"))

    writer.draw_line(geo.margin_x_mm, top + 1, geo.page_width_mm - geo.margin_x_mm, top + 1,
                     _colour(brand, "primary"))
    writer.draw_text(meta.date_label, geo.margin_x_mm, baseline, style)
    writer.draw_text(f"Page {page_number} of {total_pages}", geo.page_width_mm / 2, baseline,
                     TextStyle(style.font_name, style.font_size, _colour(brand, "text"), "center"))
    writer.draw_text(meta.confidentiality, geo.page_width_mm - geo.margin_x_mm, baseline,
                     TextStyle(style.font_name, style.font_size, style.color, "right"))


def render_footers(writer: DocumentWriter, document: Document,
                   geo: PageGeometry, brand: dict[str, Any]) -> None:
    """Revisit every content page and stamp its footer.

    Must only run after every page has been opened; the denominator is
    the writer's final page count.
    """
    total = writer.page_count
    if total != document.total_pages:
        raise RuntimeError(
            f"Writer has {total} pages but document expects {document.total_pages}"
        )
    for page_number in range(2, total + 1):
        writer.set_page(page_number)
        render_footer(writer, page_number, total, document.metadata, geo, brand)


def render_document(writer: DocumentWriter, document: Document,
                    geo: PageGeometry, brand: dict[str, Any] | None = None) -> None:
    """Run both rendering passes for `document` onto `writer`."""
    brand = brand or DEFAULT_BRAND

    writer.new_page()
    render_cover(writer, document.cover, geo, brand)
    for page in document.content_pages:
        writer.new_page()
        render_content_page(writer, page, document.metadata, geo, brand)

    render_footers(writer, document, geo, brand)
    logger.info("Rendered %d pages (cover + %d content)",
                document.total_pages, len(document.content_pages))
