"""
test_naming.py — Unit tests for the report filename contract.
"""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from report_compositor.naming import DEFAULT_SLUG, report_filename, slugify


class TestSlugify:

    def test_apostrophe_and_punctuation(self):
        assert slugify("Joe's Bakery & Co.") == "joes-bakery-co"

    def test_collapses_runs(self):
        assert slugify("Acme   --  Widgets!!") == "acme-widgets"

    def test_keeps_digits(self):
        assert slugify("Studio 54") == "studio-54"

    def test_none_falls_back(self):
        assert slugify(None) == DEFAULT_SLUG

    def test_empty_falls_back(self):
        assert slugify("") == DEFAULT_SLUG

    def test_only_symbols_falls_back(self):
        assert slugify("&&& ...") == DEFAULT_SLUG


class TestReportFilename:

    def test_full_filename(self):
        when = datetime(2026, 10, 18, 9, 30)
        assert report_filename("Joe's Bakery & Co.", when) == "joes-bakery-co-report-20261018.pdf"

    def test_missing_client(self):
        when = datetime(2026, 1, 5)
        assert report_filename(None, when) == "client-report-20260105.pdf"

    def test_custom_extension(self):
        assert report_filename("Acme", datetime(2026, 3, 1), ext="png") == "acme-report-20260301.png"
