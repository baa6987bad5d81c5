"""Data model for a single export job."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import Settings
from .exceptions import NoActiveDocumentError


STAGE_DIRNAME = "__stage__"
ARCHIVE_SUFFIX = ".zip"
DOCUMENT_SUFFIXES = (".md", ".markdown")


def document_base_name(document: Path) -> str:
    """Return the note name without its Markdown extension."""
    name = document.name
    for suffix in DOCUMENT_SUFFIXES:
        if name.lower().endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


@dataclass(slots=True, frozen=True)
class ExportJob:
    """Paths derived from the active note for one export invocation."""

    source_document: Path
    vault_root: Path
    base_name: str
    output_dir: Path

    @classmethod
    def create(cls, document: Path | None, vault_root: Path, settings: Settings) -> ExportJob:
        if document is None:
            raise NoActiveDocumentError("No active note selected.")
        document = Path(document)
        if not document.is_file():
            raise NoActiveDocumentError(f"Note '{document}' does not exist.")
        vault_root = Path(vault_root).resolve()
        source = document.resolve()
        base_name = document_base_name(source)
        return cls(
            source_document=source,
            vault_root=vault_root,
            base_name=base_name,
            output_dir=vault_root / settings.output_dir_name / base_name,
        )

    @property
    def tex_name(self) -> str:
        return f"{self.base_name}.tex"

    @property
    def tex_path(self) -> Path:
        """Location where the converter is expected to write its LaTeX."""
        return self.output_dir / self.tex_name

    @property
    def stage_root(self) -> Path:
        return self.output_dir / STAGE_DIRNAME

    @property
    def archive_path(self) -> Path:
        return self.output_dir / f"{self.base_name}{ARCHIVE_SUFFIX}"


@dataclass(slots=True, frozen=True)
class ConversionResult:
    """Outcome of the Markdown to LaTeX converter."""

    success: bool
    stdout: str
    stderr: str
    tex_path: Path


@dataclass(slots=True, frozen=True)
class AssetCopyTask:
    """Vault asset to copy into the stage at ``archive_path``."""

    source: Path
    archive_path: str


@dataclass(slots=True, frozen=True)
class DrawingReference:
    """Embedded drawing reference found in the converted LaTeX."""

    text: str
    relative_path: str


@dataclass(slots=True, frozen=True)
class DrawingExportResult:
    """Raster produced for an embedded drawing."""

    relative_path: str
    absolute_path: Path


__all__ = [
    "ARCHIVE_SUFFIX",
    "AssetCopyTask",
    "ConversionResult",
    "DrawingExportResult",
    "DrawingReference",
    "ExportJob",
    "STAGE_DIRNAME",
    "document_base_name",
]
