"""
test_cli.py — Tests for the main.py entry point.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

import main


@pytest.fixture
def config_file(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "report:\n  title: 'Monthly SEO Report'\n"
        "capture:\n  dpi: 50\n  settle_delay_s: 0\n"
        f"paths:\n  output_dir: '{tmp_path / 'out'}'\n  log_dir: '{tmp_path / 'logs'}'\n"
    )
    root = logging.getLogger()
    before = list(root.handlers)
    yield cfg
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


class TestArgs:

    def test_defaults(self):
        args = main._parse_args([])
        assert args.config == "config.yaml"
        assert args.client == ""
        assert args.sections is None

    def test_sections_choices_enforced(self):
        with pytest.raises(SystemExit):
            main._parse_args(["--sections", "nope"])


class TestMain:

    def test_missing_config_exits_1(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            main.main(["--config", str(tmp_path / "missing.yaml")])
        assert info.value.code == 1

    def test_export_writes_report(self, config_file, tmp_path):
        with pytest.raises(SystemExit) as info:
            main.main([
                "--config", str(config_file),
                "--client", "Joe's Bakery & Co.",
                "--sections", "ranking_trend", "keyword_buckets",
            ])
        assert info.value.code == 0
        expected = tmp_path / "out" / f"joes-bakery-co-report-{datetime.now():%Y%m%d}.pdf"
        assert expected.read_bytes().startswith(b"%PDF")
