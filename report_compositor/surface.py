"""
surface.py — Live capture surface and scoped layout overrides.

A Surface is the ordered set of dashboard sections currently on screen.
Each Section wraps a matplotlib Figure. Before capture the figures are
temporarily pinned to a minimum width with an opaque background and
their on-screen-only artists are hidden; the overrides are always
reverted when the scope exits, whether capture succeeded or not.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from matplotlib.artist import Artist
from matplotlib.figure import Figure

logger = logging.getLogger(__name__)


@dataclass
class Section:
    """One independently captured unit of dashboard content.

    `hide_on_export` lists on-screen-only artists (live badges, control
    hints) that must not appear in the captured bitmap.
    """
    section_id: str
    figure: Figure | None
    title: str = ""
    hide_on_export: list[Artist] = field(default_factory=list)


class Surface:
    """Ordered, mutable collection of live sections."""

    def __init__(self, sections: list[Section] | None = None):
        self._sections: list[Section] = list(sections or [])
        self.exporting = False

    def add(self, section: Section) -> None:
        self._sections.append(section)

    @property
    def sections(self) -> list[Section]:
        return list(self._sections)

    def __len__(self) -> int:
        return len(self._sections)


@contextmanager
def layout_overrides(
    surface: Surface,
    min_width_in: float | None = None,
    background: str | None = "#FFFFFF",
) -> Iterator[Surface]:
    """Temporarily prepare every section figure for capture.

    On entry: mark the surface as exporting, widen figures narrower than
    `min_width_in`, force the background colour and hide each section's
    `hide_on_export` artists. On exit: restore each figure's original size
    and facecolour, each artist's visibility, and clear the marker.

    Args:
        surface: Surface whose sections are about to be captured.
        min_width_in: Minimum figure width in inches (None leaves widths alone).
        background: Facecolour applied during capture (None leaves it alone).
    """
    saved: list[tuple[Figure, tuple[float, float], tuple]] = []
    hidden: list[tuple[Artist, bool]] = []
    surface.exporting = True
    try:
        for section in surface.sections:
            for artist in section.hide_on_export:
                hidden.append((artist, artist.get_visible()))
                artist.set_visible(False)
            fig = section.figure
            if fig is None:
                continue
            width, height = (float(v) for v in fig.get_size_inches())
            saved.append((fig, (width, height), fig.get_facecolor()))
            if min_width_in and width < min_width_in:
                fig.set_size_inches(min_width_in, height, forward=False)
            if background:
                fig.set_facecolor(background)
        logger.debug("Applied capture overrides to %d figures, hid %d artists",
                     len(saved), len(hidden))
        yield surface
    finally:
        for artist, visible in reversed(hidden):
            artist.set_visible(visible)
        for fig, (width, height), facecolor in reversed(saved):
            fig.set_size_inches(width, height, forward=False)
            fig.set_facecolor(facecolor)
        surface.exporting = False
        logger.debug("Reverted capture overrides on %d figures", len(saved))
