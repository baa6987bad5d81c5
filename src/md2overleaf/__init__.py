"""Export Markdown notes as Overleaf-ready LaTeX bundles."""

from __future__ import annotations

from md2overleaf.api import ExportRequest, ExportResult, ExportService
from md2overleaf.core.config import Settings, expand_vault_path
from md2overleaf.core.exceptions import (
    ArchiveError,
    ConversionFailedError,
    ExportError,
    NoActiveDocumentError,
    OutputTimeoutError,
    SettingsError,
    StagingError,
    ToolExecutionError,
    UploadFailedError,
)
from md2overleaf.core.settings_store import SettingsStore
from md2overleaf.version import get_version


__version__ = get_version()

__all__ = [
    "ArchiveError",
    "ConversionFailedError",
    "ExportError",
    "ExportRequest",
    "ExportResult",
    "ExportService",
    "NoActiveDocumentError",
    "OutputTimeoutError",
    "Settings",
    "SettingsError",
    "SettingsStore",
    "StagingError",
    "ToolExecutionError",
    "UploadFailedError",
    "__version__",
    "expand_vault_path",
    "get_version",
]
