"""Invoke the Markdown to LaTeX converter script."""

from __future__ import annotations

import logging

from md2overleaf.core.config import Settings
from md2overleaf.core.exceptions import ConversionFailedError, OutputTimeoutError, StagingError
from md2overleaf.core.models import ConversionResult, ExportJob

from .process import failure_detail, run_tool, wait_for_file


logger = logging.getLogger(__name__)


def converter_command(job: ExportJob, settings: Settings) -> list[str]:
    """Return ``<script> -v <note>`` for ``job``."""
    return [settings.converter_command(job.vault_root), "-v", str(job.source_document)]


def run_converter(job: ExportJob, settings: Settings) -> ConversionResult:
    """Run the converter and wait until its LaTeX output is present."""
    try:
        job.tex_path.unlink(missing_ok=True)
    except OSError as exc:
        raise StagingError(f"Unable to remove previous output '{job.tex_path}'") from exc

    result = run_tool(
        converter_command(job, settings),
        cwd=job.vault_root,
        description="conversion script",
        search_path=settings.search_path,
    )
    if result.returncode != 0:
        detail = failure_detail(result)
        message = f"Conversion script exited with status {result.returncode}"
        if detail:
            message = f"{message}: {detail}"
        raise ConversionFailedError(
            message,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    logger.info("Expecting LaTeX at %s", job.tex_path)
    if not wait_for_file(
        job.tex_path, timeout=settings.output_timeout, interval=settings.poll_interval
    ):
        raise OutputTimeoutError(
            f"Conversion script succeeded but '{job.tex_path}' did not appear "
            f"within {settings.output_timeout:g}s"
        )

    return ConversionResult(
        success=True,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        tex_path=job.tex_path,
    )


__all__ = ["converter_command", "run_converter"]
