"""
packer.py — Page Packer.

Greedy first-fit-sequential packing of ordered Blocks into fixed-height
pages. Blocks are never reordered, duplicated or split. A block taller
than a page is placed alone at the top of its page and allowed to
overflow the bottom edge.
"""

import logging
from dataclasses import dataclass, field

from report_compositor.measurer import Block

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """A Block positioned on a page, offset from the top of the content area."""
    block: Block
    y_offset_mm: float


@dataclass
class Page:
    """One content page (the cover is not a Page)."""
    index: int
    placements: list[Placement] = field(default_factory=list)

    @property
    def used_height_mm(self) -> float:
        if not self.placements:
            return 0.0
        last = self.placements[-1]
        return last.y_offset_mm + last.block.mm_height


def pack_blocks(blocks: list[Block], usable_height_mm: float, gap_mm: float) -> list[Page]:
    """Assign ordered blocks to pages.

    A block goes on the current page if the page is empty or if it fits
    below the previous block plus one gap; otherwise it starts a new page.

    Args:
        blocks: Measured blocks in export order.
        usable_height_mm: Content height available on each page (H).
        gap_mm: Vertical gap between consecutive blocks on a page (G).

    Returns:
        Content pages in order; empty list when there are no blocks.
    """
    pages: list[Page] = []
    if not blocks:
        return pages

    page = Page(index=0)
    pages.append(page)
    cursor_y = 0.0

    for block in blocks:
        h = block.mm_height
        if cursor_y == 0 or cursor_y + gap_mm + h <= usable_height_mm:
            y = 0.0 if cursor_y == 0 else cursor_y + gap_mm
        else:
            page = Page(index=page.index + 1)
            pages.append(page)
            y = 0.0

        page.placements.append(Placement(block=block, y_offset_mm=y))
        cursor_y = y + h

        if y == 0 and h > usable_height_mm:
            logger.warning(
                "Section %s (%.1f mm) exceeds page content height (%.1f mm); "
                "placing alone and letting it overflow",
                block.source_id, h, usable_height_mm,
            )
        logger.debug("Placed %s on page %d at y=%.1f mm", block.source_id, page.index, y)

    logger.info("Packed %d blocks into %d content pages", len(blocks), len(pages))
    return pages
