"""Export tldraw drawings embedded in notes to PNG images."""

from __future__ import annotations

import logging
from pathlib import Path
import re

from md2overleaf.core.config import Settings
from md2overleaf.core.diagnostics import DiagnosticEmitter, NullEmitter
from md2overleaf.core.models import DrawingExportResult

from .process import failure_detail, run_tool, wait_for_file


logger = logging.getLogger(__name__)

_TLDRAW_BLOCK_RE = re.compile(r"```tldraw\s*\n([\s\S]*?)```")

# npx-based converters prompt before installing missing packages.
_DRAWING_ENV = {"npm_config_yes": "true"}


def extract_drawing_payload(text: str) -> str | None:
    """Return the JSON body of the first ```` ```tldraw ```` fence."""
    match = _TLDRAW_BLOCK_RE.search(text)
    if match is None:
        return None
    return match.group(1)


class DrawingExporter:
    """Turn drawing notes into PNG files inside the staging tree.

    Temporary ``.tldr`` files go to ``work_dir`` rather than next to the
    drawing, so a syncing vault never sees them.
    """

    def __init__(
        self,
        *,
        vault_root: Path,
        stage_root: Path,
        work_dir: Path,
        settings: Settings,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.vault_root = vault_root
        self.stage_root = stage_root
        self.work_dir = work_dir
        self.settings = settings
        self.emitter = emitter or NullEmitter()

    def __call__(self, relative_path: str) -> DrawingExportResult | None:
        return self.export(self.vault_root / relative_path)

    def raster_relative_path(self, source: Path) -> str:
        return f"{self.settings.asset_dir}/{source.stem}.png"

    def export(self, source: Path) -> DrawingExportResult | None:
        """Export ``source`` and return the staged PNG, or ``None`` on failure."""
        try:
            return self._export(source)
        except Exception as exc:
            logger.warning("Drawing export failed for %s: %s", source, exc, exc_info=True)
            return None

    def _export(self, source: Path) -> DrawingExportResult | None:
        payload = extract_drawing_payload(source.read_text(encoding="utf-8"))
        if payload is None:
            logger.warning("No tldraw block found in %s", source)
            return None

        relative = self.raster_relative_path(source)
        target = self.stage_root / relative
        temporary = self.work_dir / f"{source.stem}.tldr"

        target.parent.mkdir(parents=True, exist_ok=True)
        self.work_dir.mkdir(parents=True, exist_ok=True)
        temporary.write_text(payload, encoding="utf-8")
        try:
            result = run_tool(
                [self.settings.drawing_converter_command(self.vault_root), temporary, target],
                cwd=self.vault_root,
                description="drawing converter",
                search_path=self.settings.search_path,
                extra_env=_DRAWING_ENV,
            )
        finally:
            temporary.unlink(missing_ok=True)

        if result.returncode != 0:
            logger.error(
                "Drawing converter exited with status %s for %s: %s",
                result.returncode,
                source,
                failure_detail(result),
            )
            return None

        if not wait_for_file(
            target, timeout=self.settings.output_timeout, interval=self.settings.poll_interval
        ):
            logger.error("Drawing converter did not produce %s", target)
            return None

        self.emitter.event("drawing_exported", {"source": str(source), "target": relative})
        return DrawingExportResult(relative_path=relative, absolute_path=target)


__all__ = ["DrawingExporter", "extract_drawing_payload"]
