"""
assembler.py — Document Assembler.

Orchestrates one export run:

    IDLE -> CAPTURING -> MEASURING -> PACKING -> RENDERING -> SERIALIZING -> SAVED -> IDLE

Any state after IDLE can fall through to FAILED.

Only one export may be in flight per assembler. Sections are captured
one at a time inside the layout-override scope, which is closed before
measuring starts. Any failure aborts the run; nothing is saved and the
user gets a single message.
"""

import asyncio
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import yaml

from report_compositor.errors import (
    CaptureError,
    EmptyContentError,
    ExportError,
    ExportInProgressError,
)
from report_compositor.geometry import PageGeometry
from report_compositor.measurer import Bitmap, measure_block
from report_compositor.naming import report_filename
from report_compositor.packer import pack_blocks
from report_compositor.rasterizer import FigureRasterizer, Rasterizer
from report_compositor.renderer import (
    DEFAULT_BRAND,
    ReportMetadata,
    build_document,
    render_document,
)
from report_compositor.surface import Section, Surface, layout_overrides
from report_compositor.writer import DocumentWriter

logger = logging.getLogger(__name__)


class ExportState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    MEASURING = "measuring"
    PACKING = "packing"
    RENDERING = "rendering"
    SERIALIZING = "serializing"
    SAVED = "saved"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Host collaborators
# ---------------------------------------------------------------------------

class Notifier(Protocol):
    """User-visible message channel."""

    def success(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def info(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes user messages to the log."""

    def success(self, message: str) -> None:
        logger.info("%s", message)

    def error(self, message: str) -> None:
        logger.error("%s", message)

    def info(self, message: str) -> None:
        logger.info("%s", message)


class DownloadSink(Protocol):
    async def save(self, filename: str, data: bytes) -> Path: ...


class DirectorySink:
    """Save finished documents into a directory.

    The bytes go to a temporary file beside the target and are renamed
    into place, so the final name only ever holds a complete document.
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)

    def _write(self, filename: str, data: bytes) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        target = self.output_dir / filename
        fd, tmp = tempfile.mkstemp(dir=self.output_dir, prefix=".export-", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, target)
        except OSError as exc:
            Path(tmp).unlink(missing_ok=True)
            raise ExportError(
                f"Could not save {target}: {exc}",
                user_message="The report could not be saved.",
            ) from exc
        return target

    async def save(self, filename: str, data: bytes) -> Path:
        return await asyncio.to_thread(self._write, filename, data)


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------

class ReportAssembler:
    """Turns a live Surface into a saved, paginated report.

    Args:
        rasterizer: Captures one section at a time.
        sink: Receives the finished bytes under the report filename.
        notifier: Receives exactly one message per export request.
        geometry: Page layout; A4 defaults when omitted.
        brand: Colour overrides for cover, header and footer.
        min_width_in: Minimum figure width pinned during capture.
        background: Figure background forced during capture.
    """

    def __init__(
        self,
        rasterizer: Rasterizer,
        sink: DownloadSink,
        notifier: Notifier | None = None,
        geometry: PageGeometry | None = None,
        brand: dict[str, Any] | None = None,
        min_width_in: float | None = None,
        background: str | None = "#FFFFFF",
    ):
        self.rasterizer = rasterizer
        self.sink = sink
        self.notifier = notifier or LoggingNotifier()
        self.geometry = geometry or PageGeometry()
        self.brand = {**DEFAULT_BRAND, **(brand or {})}
        self.min_width_in = min_width_in
        self.background = background
        self.state = ExportState.IDLE
        self._in_progress = False

    @classmethod
    def from_config(
        cls,
        config_path: str = "config.yaml",
        sink: DownloadSink | None = None,
        notifier: Notifier | None = None,
        rasterizer: Rasterizer | None = None,
    ) -> "ReportAssembler":
        """Build an assembler from config.yaml."""
        with open(config_path, "r") as fh:
            cfg = yaml.safe_load(fh) or {}
        return cls.from_dict(cfg, sink=sink, notifier=notifier, rasterizer=rasterizer)

    @classmethod
    def from_dict(
        cls,
        cfg: dict[str, Any],
        sink: DownloadSink | None = None,
        notifier: Notifier | None = None,
        rasterizer: Rasterizer | None = None,
    ) -> "ReportAssembler":
        """Build an assembler from an already-loaded config mapping."""
        cfg = cfg or {}
        capture = cfg.get("capture", {}) or {}
        paths = cfg.get("paths", {}) or {}
        report = cfg.get("report", {}) or {}

        return cls(
            rasterizer=rasterizer or FigureRasterizer(
                dpi=int(capture.get("dpi", 150)),
                settle_delay_s=float(capture.get("settle_delay_s", 0.0)),
            ),
            sink=sink or DirectorySink(paths.get("output_dir", "data/output")),
            notifier=notifier,
            geometry=PageGeometry.from_config(cfg),
            brand=report.get("brand"),
            min_width_in=capture.get("min_width_in"),
            background=capture.get("background", "#FFFFFF"),
        )

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def _transition(self, state: ExportState) -> None:
        logger.info("Export state: %s -> %s", self.state.value, state.value)
        self.state = state

    async def export(self, surface: Surface, metadata: ReportMetadata) -> Path | None:
        """Export `surface` as a report.

        Returns:
            Path of the saved document, or None if the request was
            rejected, had nothing to export, or failed.
        """
        if self._in_progress:
            exc = ExportInProgressError("Export requested while another is running")
            logger.warning("%s", exc)
            self.notifier.error(exc.user_message)
            return None

        self._in_progress = True
        try:
            path = await self._run(surface, metadata)
        except EmptyContentError as exc:
            logger.info("Nothing to export: %s", exc)
            self.state = ExportState.IDLE
            self.notifier.info(exc.user_message)
            return None
        except ExportError as exc:
            logger.error("Export failed in %s: %s", self.state.value, exc, exc_info=True)
            self._transition(ExportState.FAILED)
            self.notifier.error(exc.user_message)
            return None
        except Exception as exc:
            logger.error("Unexpected export failure in %s: %s", self.state.value, exc,
                         exc_info=True)
            self._transition(ExportState.FAILED)
            self.notifier.error(ExportError.user_message)
            return None
        finally:
            self._in_progress = False

        self.notifier.success(f"Report exported: {path.name}")
        self._transition(ExportState.IDLE)
        return path

    async def _capture_all(self, surface: Surface) -> list[tuple[Section, Bitmap]]:
        """Capture sections strictly one after another."""
        captures = []
        with layout_overrides(surface, self.min_width_in, self.background):
            for section in surface.sections:
                try:
                    bitmap = await self.rasterizer.capture(section)
                except CaptureError:
                    raise
                except Exception as exc:
                    raise CaptureError(section.section_id, str(exc)) from exc
                captures.append((section, bitmap))
        return captures

    async def _run(self, surface: Surface, metadata: ReportMetadata) -> Path:
        if not surface.sections:
            raise EmptyContentError("Surface has no sections")

        geo = self.geometry
        logger.info("Exporting %d sections for %s", len(surface),
                    metadata.client_name or "(no client)")

        self._transition(ExportState.CAPTURING)
        captures = await self._capture_all(surface)

        self._transition(ExportState.MEASURING)
        blocks = [
            measure_block(bitmap, geo.usable_width_mm, order=i, source_id=section.section_id)
            for i, (section, bitmap) in enumerate(captures)
        ]

        self._transition(ExportState.PACKING)
        pages = pack_blocks(blocks, geo.usable_height_mm, geo.gap_mm)
        document = build_document(pages, metadata)

        self._transition(ExportState.RENDERING)
        writer = DocumentWriter(
            geo.page_width_mm,
            geo.page_height_mm,
            title=metadata.title,
            author=metadata.client_name,
            subject=metadata.period_label,
        )
        render_document(writer, document, geo, self.brand)

        self._transition(ExportState.SERIALIZING)
        data = await asyncio.to_thread(writer.serialize)
        filename = report_filename(metadata.client_name, metadata.generated_at)
        path = await self.sink.save(filename, data)

        self._transition(ExportState.SAVED)
        logger.info("Report saved to %s (%d pages)", path, document.total_pages)
        return path
