"""Materialise the staging tree that becomes the Overleaf archive."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path
import shutil

from md2overleaf.core.diagnostics import DiagnosticEmitter, NullEmitter
from md2overleaf.core.exceptions import StagingError
from md2overleaf.core.models import AssetCopyTask
from md2overleaf.core.rewrite import patch_main_document


logger = logging.getLogger(__name__)

MAIN_DOCUMENT = "main.tex"


class StageBuilder:
    """Own the staging directory of a single export job."""

    def __init__(self, stage_root: Path, *, emitter: DiagnosticEmitter | None = None) -> None:
        self.stage_root = stage_root
        self.emitter = emitter or NullEmitter()

    def reset(self) -> Path:
        """Delete and recreate the staging directory."""
        try:
            if self.stage_root.exists():
                shutil.rmtree(self.stage_root)
            self.stage_root.mkdir(parents=True)
        except OSError as exc:
            raise StagingError(f"Unable to reset staging directory '{self.stage_root}'") from exc
        logger.debug("Reset staging directory %s", self.stage_root)
        return self.stage_root

    def copy_assets(self, tasks: Iterable[AssetCopyTask]) -> tuple[list[str], list[Path]]:
        """Copy referenced assets, skipping missing ones.

        Returns the staged relative paths and the missing sources.
        """
        copied: list[str] = []
        missing: list[Path] = []
        for task in tasks:
            if not task.source.is_file():
                logger.warning("Missing referenced image: %s", task.source)
                self.emitter.warning(f"Missing referenced image: {task.source}")
                missing.append(task.source)
                continue
            if task.archive_path in copied:
                continue
            destination = self.stage_root / task.archive_path
            if destination.exists():
                logger.warning("Image %s replaces staged file %s", task.source, destination)
                self.emitter.warning(
                    f"Image '{task.source}' replaces already staged '{task.archive_path}'"
                )
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(task.source, destination)
            except OSError as exc:
                raise StagingError(
                    f"Unable to copy '{task.source}' to '{destination}'"
                ) from exc
            copied.append(task.archive_path)
        return copied, missing

    def copy_templates(self, vault_root: Path, names: Iterable[str]) -> list[Path]:
        """Copy shared template files from the vault root, overwriting."""
        copied: list[Path] = []
        for name in names:
            source = vault_root / name
            destination = self.stage_root / name
            try:
                shutil.copyfile(source, destination)
            except OSError as exc:
                raise StagingError(f"Unable to copy template '{source}'") from exc
            copied.append(destination)
        return copied

    def patch_main_document(self, title: str, include_name: str) -> Path | None:
        """Retitle the staged ``main.tex`` and point it at the exported document."""
        target = self.stage_root / MAIN_DOCUMENT
        if not target.exists():
            return None
        try:
            text = target.read_text(encoding="utf-8")
            target.write_text(patch_main_document(text, title, include_name), encoding="utf-8")
        except OSError as exc:
            raise StagingError(f"Unable to patch '{target}'") from exc
        return target

    def write_document(self, name: str, text: str) -> Path:
        target = self.stage_root / name
        try:
            target.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise StagingError(f"Unable to write '{target}'") from exc
        return target


__all__ = ["MAIN_DOCUMENT", "StageBuilder"]
