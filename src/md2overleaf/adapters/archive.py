"""Fold a staging tree into a single ZIP archive."""

from __future__ import annotations

import logging
from pathlib import Path
import zipfile

from md2overleaf.core.exceptions import ArchiveError


logger = logging.getLogger(__name__)


def build_archive(stage_root: Path, archive_path: Path) -> Path:
    """Write every file below ``stage_root`` into ``archive_path``.

    Entry names are relative to ``stage_root`` so the LaTeX sources sit at the
    archive root.
    """
    files = sorted(path for path in stage_root.rglob("*") if path.is_file())
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path, "w", zipfile.ZIP_DEFLATED) as archive:
            for path in files:
                arcname = path.relative_to(stage_root).as_posix()
                logger.debug("Adding %s", arcname)
                archive.write(path, arcname)
    except OSError as exc:
        raise ArchiveError(f"Unable to write archive '{archive_path}'") from exc
    logger.info("Wrote %s with %d file(s)", archive_path, len(files))
    return archive_path


def list_archive(archive_path: Path) -> list[str]:
    """Return the entry names stored in ``archive_path``."""
    with zipfile.ZipFile(archive_path) as archive:
        return archive.namelist()


__all__ = ["build_archive", "list_archive"]
