"""Export orchestration shared by the CLI and embedding integrations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import logging
from pathlib import Path

from md2overleaf.adapters.archive import build_archive, list_archive
from md2overleaf.adapters.converter import run_converter
from md2overleaf.adapters.drawing import DrawingExporter
from md2overleaf.adapters.staging import StageBuilder
from md2overleaf.adapters.upload import (
    build_deep_link,
    extract_upload_url,
    open_link,
    upload_archive,
)
from md2overleaf.core.config import Settings
from md2overleaf.core.diagnostics import DiagnosticEmitter, NullEmitter
from md2overleaf.core.exceptions import StagingError
from md2overleaf.core.models import ExportJob
from md2overleaf.core.rewrite import derive_title, rewrite_references, substitute_drawings


logger = logging.getLogger(__name__)


__all__ = [
    "ExportRequest",
    "ExportResult",
    "ExportService",
]


@dataclass(slots=True)
class ExportRequest:
    """Description of one export run."""

    document: Path | None
    vault_root: Path
    settings: Settings = field(default_factory=Settings)
    upload: bool = True
    open_link: bool | None = None
    emitter: DiagnosticEmitter | None = None

    @property
    def should_open(self) -> bool:
        if self.open_link is None:
            return self.settings.auto_open
        return self.open_link


@dataclass(slots=True)
class ExportResult:
    """Artifacts produced by a completed export."""

    job: ExportJob
    tex_path: Path
    archive_path: Path
    entries: list[str] = field(default_factory=list)
    missing_assets: list[Path] = field(default_factory=list)
    failed_drawings: list[str] = field(default_factory=list)
    upload_url: str | None = None
    deep_link: str | None = None
    opened: bool = False


class ExportService:
    """Run the note → LaTeX → ZIP → Overleaf pipeline for one note."""

    def __init__(self, *, opener: Callable[[str], object] | None = None) -> None:
        self._opener = opener or open_link

    def export(self, request: ExportRequest) -> ExportResult:
        emitter = request.emitter or NullEmitter()
        settings = request.settings
        job = ExportJob.create(request.document, request.vault_root, settings)
        logger.info("Exporting %s (vault: %s)", job.source_document, job.vault_root)
        self._check_template_collision(job, settings)
        self._prepare_output_dir(job)

        conversion = run_converter(job, settings)
        emitter.event("conversion_complete", {"path": str(conversion.tex_path)})

        try:
            tex = conversion.tex_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StagingError(f"Unable to read '{conversion.tex_path}'") from exc

        stage = StageBuilder(job.stage_root, emitter=emitter)
        stage.reset()

        rewritten = rewrite_references(tex, job.vault_root, settings.asset_dir)
        exporter = DrawingExporter(
            vault_root=job.vault_root,
            stage_root=job.stage_root,
            work_dir=job.output_dir,
            settings=settings,
            emitter=emitter,
        )
        text, failed_drawings = substitute_drawings(rewritten.text, rewritten.drawings, exporter)
        for relative in failed_drawings:
            emitter.warning(f"Drawing could not be exported: {relative}")

        _, missing = stage.copy_assets(rewritten.copy_tasks)
        stage.copy_templates(job.vault_root, settings.template_files)
        stage.patch_main_document(derive_title(job.base_name), job.base_name)
        stage.write_document(job.tex_name, text)

        archive_path = build_archive(job.stage_root, job.archive_path)
        entries = list_archive(archive_path)
        emitter.event("archive_written", {"path": str(archive_path), "entries": len(entries)})

        result = ExportResult(
            job=job,
            tex_path=job.stage_root / job.tex_name,
            archive_path=archive_path,
            entries=entries,
            missing_assets=missing,
            failed_drawings=failed_drawings,
        )
        if request.upload:
            self._publish(result, request, emitter)
        return result

    def _check_template_collision(self, job: ExportJob, settings: Settings) -> None:
        # Case-insensitive filesystems would merge main.tex and Main.tex.
        templates = {name.lower() for name in settings.template_files}
        if job.tex_name.lower() in templates:
            raise StagingError(
                f"Note '{job.source_document.name}' would overwrite template "
                f"'{job.tex_name}'; rename the note before exporting"
            )

    def _prepare_output_dir(self, job: ExportJob) -> None:
        try:
            job.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StagingError(f"Unable to create '{job.output_dir}'") from exc

    def _publish(
        self, result: ExportResult, request: ExportRequest, emitter: DiagnosticEmitter
    ) -> None:
        settings = request.settings
        emitter.event("upload_started", {"host": settings.upload_host})
        output = upload_archive(
            result.archive_path, settings.upload_host, search_path=settings.search_path
        )

        upload_url = extract_upload_url(output, settings.upload_host)
        if upload_url is None:
            logger.error("Could not find URL in upload output: %s", output)
            emitter.event("upload_no_url", {"output": output})
            return

        result.upload_url = upload_url
        result.deep_link = build_deep_link(
            settings.editor_url, upload_url, settings.engine, result.job.base_name
        )
        emitter.event("deep_link", {"url": result.deep_link})

        if request.should_open:
            emitter.event("opening_editor", {"url": result.deep_link})
            self._opener(result.deep_link)
            result.opened = True
