"""
test_surface.py — Unit tests for the capture surface and layout overrides.
"""

import sys
from pathlib import Path

import pytest
from matplotlib.colors import to_rgba
from matplotlib.figure import Figure

sys.path.insert(0, str(Path(__file__).parent.parent))

from report_compositor.surface import Section, Surface, layout_overrides


def _surface() -> Surface:
    narrow = Figure(figsize=(4, 2))
    narrow.set_facecolor("#EEEEEE")
    wide = Figure(figsize=(10, 3))
    wide.set_facecolor("#EEEEEE")
    return Surface([Section("narrow", narrow), Section("wide", wide)])


class TestSurface:

    def test_sections_returns_copy(self):
        surface = _surface()
        surface.sections.append(Section("x", None))
        assert len(surface) == 2

    def test_add_keeps_order(self):
        surface = Surface()
        surface.add(Section("a", None))
        surface.add(Section("b", None))
        assert [s.section_id for s in surface.sections] == ["a", "b"]


class TestLayoutOverrides:

    def test_applied_inside_scope(self):
        surface = _surface()
        with layout_overrides(surface, min_width_in=8, background="#FFFFFF"):
            narrow, wide = (s.figure for s in surface.sections)
            assert surface.exporting
            assert tuple(narrow.get_size_inches()) == (8, 2)
            assert tuple(wide.get_size_inches()) == (10, 3)
            assert narrow.get_facecolor() == to_rgba("#FFFFFF")

    def test_reverted_on_success(self):
        surface = _surface()
        with layout_overrides(surface, min_width_in=8):
            pass
        narrow, _ = (s.figure for s in surface.sections)
        assert not surface.exporting
        assert tuple(narrow.get_size_inches()) == (4, 2)
        assert narrow.get_facecolor() == to_rgba("#EEEEEE")

    def test_reverted_on_exception(self):
        surface = _surface()
        with pytest.raises(RuntimeError):
            with layout_overrides(surface, min_width_in=8):
                raise RuntimeError("capture blew up")
        narrow, wide = (s.figure for s in surface.sections)
        assert not surface.exporting
        assert tuple(narrow.get_size_inches()) == (4, 2)
        assert tuple(wide.get_size_inches()) == (10, 3)
        assert wide.get_facecolor() == to_rgba("#EEEEEE")

    def test_sections_without_figure_are_skipped(self):
        surface = Surface([Section("detached", None)])
        with layout_overrides(surface, min_width_in=8):
            assert surface.exporting
        assert not surface.exporting


class TestHideOnExport:

    def _badged(self):
        fig = Figure(figsize=(4, 2))
        badge = fig.text(0.99, 0.98, "LIVE")
        hint = fig.text(0.01, 0.02, "drag to zoom")
        hint.set_visible(False)
        return Surface([Section("chart", fig, hide_on_export=[badge, hint])]), badge, hint

    def test_hidden_inside_scope(self):
        surface, badge, hint = self._badged()
        with layout_overrides(surface):
            assert not badge.get_visible()
            assert not hint.get_visible()

    def test_visibility_restored_on_success(self):
        surface, badge, hint = self._badged()
        with layout_overrides(surface):
            pass
        assert badge.get_visible()
        assert not hint.get_visible()

    def test_visibility_restored_on_exception(self):
        surface, badge, hint = self._badged()
        with pytest.raises(RuntimeError):
            with layout_overrides(surface):
                raise RuntimeError("capture blew up")
        assert badge.get_visible()
        assert not hint.get_visible()

    def test_detached_section_artists_still_hidden(self):
        other = Figure()
        badge = other.text(0.5, 0.5, "LIVE")
        surface = Surface([Section("detached", None, hide_on_export=[badge])])
        with layout_overrides(surface):
            assert not badge.get_visible()
        assert badge.get_visible()
