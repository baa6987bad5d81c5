"""Emitter that renders export notices and remembers them for the run summary."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from md2overleaf.core.diagnostics import format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter:
    """Print notices as they happen and record them on the CLI state.

    ``md2overleaf export`` reads the recorded warnings and events back once the
    job finished to print its closing summary.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._state.record_warning(message)
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        data = dict(payload)
        self._state.record_event(name, data)
        message = format_event_message(name, data)
        if message:
            render_message("info", message)


__all__ = ["CliEmitter"]
