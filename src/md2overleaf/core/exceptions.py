"""Custom exception hierarchy for the export pipeline."""

from __future__ import annotations


class ExportError(RuntimeError):
    """Base exception for export failures that abort the pipeline."""


class NoActiveDocumentError(ExportError):
    """Raised when no usable source note was supplied."""


class SettingsError(ExportError):
    """Raised when persisted settings cannot be loaded or validated."""


class ToolExecutionError(ExportError):
    """Raised when an external tool fails to start or exits with an error."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class ConversionFailedError(ToolExecutionError):
    """Raised when the Markdown to LaTeX converter exits with an error."""


class UploadFailedError(ToolExecutionError):
    """Raised when the upload transport exits with an error."""


class OutputTimeoutError(ExportError):
    """Raised when a tool succeeded but its expected output never appeared."""


class StagingError(ExportError):
    """Raised when the staging tree cannot be reset, populated, or written."""


class ArchiveError(ExportError):
    """Raised when the project archive cannot be written."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ArchiveError",
    "ConversionFailedError",
    "ExportError",
    "NoActiveDocumentError",
    "OutputTimeoutError",
    "SettingsError",
    "StagingError",
    "ToolExecutionError",
    "UploadFailedError",
    "exception_hint",
    "exception_messages",
]
