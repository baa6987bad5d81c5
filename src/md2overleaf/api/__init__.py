"""Public entry points for embedding the export pipeline.

Usage Example
:
    >>> from pathlib import Path
    >>> from md2overleaf.api import ExportRequest, ExportService
    >>> request = ExportRequest(document=Path("Notes.md"), vault_root=Path("."), upload=False)
    >>> request.should_open
    True
"""

from __future__ import annotations

from .service import ExportRequest, ExportResult, ExportService


__all__ = [
    "ExportRequest",
    "ExportResult",
    "ExportService",
]
