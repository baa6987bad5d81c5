"""Diagnostic abstractions shared across the export pipeline."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and operator notices."""

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(self, *, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return the operator notice for a pipeline event, if it has one."""
    data = dict(payload)

    if name == "conversion_complete":
        return "Conversion complete. Preparing ZIP..."

    if name == "archive_written":
        path = data.get("path") or "<unknown>"
        entries = data.get("entries")
        suffix = f" ({entries} entries)" if entries is not None else ""
        return f"Archive written: {path}{suffix}"

    if name == "upload_started":
        host = data.get("host")
        return f"Uploading to {host}..." if host else "Uploading..."

    if name == "upload_no_url":
        return "Upload finished, but no URL found in output."

    if name == "deep_link":
        return f"Overleaf URL: {data.get('url') or '<unknown>'}"

    if name == "opening_editor":
        return "Opening in Overleaf..."

    if name == "drawing_exported":
        source = data.get("source") or "<unknown>"
        target = data.get("target") or "<unknown>"
        return f"Exported drawing {source} -> {target}"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
