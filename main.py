"""
main.py — Report Compositor — CLI Entry Point.

Builds the sample SEO dashboard sections, then runs one export through
the compositor: capture -> measure -> pack -> render -> save.

Usage:
    python main.py --client "Joe's Bakery & Co." --domain joesbakery.com
    python main.py --client Acme --sections ranking_trend top_keywords
    python main.py --config custom.yaml --log-level DEBUG

Outputs (paths.output_dir):
    {client-slug}-report-{yyyymmdd}.pdf — cover + packed sections
"""

import argparse
import asyncio
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path

import yaml


def _configure_logging(log_dir: str = "logs", level: str = "INFO") -> None:
    """Configure rotating file handler + stream handler.

    Args:
        log_dir: Directory for log files.
        level: Log level string.
    """
    effective_level = os.environ.get("LOG_LEVEL", level).upper()
    numeric = getattr(logging, effective_level, logging.INFO)

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_file = Path(log_dir) / f"export_{datetime.today().strftime('%Y%m%d')}.log"

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    fh = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=10 * 1024 * 1024, backupCount=7, encoding="utf-8"
    )
    fh.setFormatter(fmt)
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(numeric)
    root.addHandler(fh)
    root.addHandler(sh)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    from report_compositor.sample_sections import SECTION_IDS

    parser = argparse.ArgumentParser(
        prog="report-compositor",
        description="Compose dashboard sections into a paginated PDF report.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --client "Joe's Bakery & Co." --domain joesbakery.com
  python main.py --client Acme --period "Sep 2026" --output-dir out/
  python main.py --sections ranking_trend top_keywords --log-level DEBUG
        """,
    )
    parser.add_argument("--config", default="config.yaml",
                        help="Path to config.yaml (default: config.yaml)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    report = parser.add_argument_group("Report")
    report.add_argument("--client", default="", help="Client name (used for the filename)")
    report.add_argument("--domain", default="", help="Client website domain")
    report.add_argument("--period", default=None,
                        help="Period label (default: current month, e.g. 'Oct 2026')")
    report.add_argument("--output-dir", default=None,
                        help="Override paths.output_dir from config")
    report.add_argument("--sections", nargs="+", choices=SECTION_IDS, default=None,
                        help="Sample sections to include, in order (default: all)")
    return parser.parse_args(argv)


def run_export(args: argparse.Namespace, cfg: dict, logger: logging.Logger) -> int:
    """Build the sample surface and export it once.

    Returns:
        0 on success, 1 on error or when nothing was exported.
    """
    from report_compositor.assembler import DirectorySink, ReportAssembler
    from report_compositor.renderer import ReportMetadata
    from report_compositor.sample_sections import build_surface

    sink = DirectorySink(args.output_dir) if args.output_dir else None
    assembler = ReportAssembler.from_dict(cfg, sink=sink)

    report_cfg = cfg.get("report", {}) or {}
    now = datetime.now()
    metadata = ReportMetadata(
        title=report_cfg.get("title", "SEO Performance Report"),
        subtitle=report_cfg.get("subtitle", "") or args.client,
        client_name=args.client,
        domain=args.domain,
        period_label=args.period or now.strftime("%b %Y"),
        generated_at=now,
        confidentiality=report_cfg.get("confidentiality", "Confidential"),
    )

    try:
        surface = build_surface(assembler.brand, args.sections)
    except Exception as exc:
        logger.error("Could not build dashboard sections: %s", exc, exc_info=True)
        return 1

    path = asyncio.run(assembler.export(surface, metadata))
    if path is None:
        return 1
    logger.info("Report written: %s", path)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Parse args, configure logging, and run one export."""
    args = _parse_args(argv)

    try:
        with open(args.config, "r") as fh:
            cfg = yaml.safe_load(fh) or {}
    except FileNotFoundError:
        print(f"ERROR: Config not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    log_dir = cfg.get("paths", {}).get("log_dir", "logs")
    _configure_logging(log_dir=log_dir, level=args.log_level)
    logger = logging.getLogger(__name__)

    logger.info(
        "Report Compositor v1.0 | %s",
        datetime.today().strftime("%Y-%m-%d %H:%M:%S"),
    )
    sys.exit(run_export(args, cfg, logger))


if __name__ == "__main__":
    main()
