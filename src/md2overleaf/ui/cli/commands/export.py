"""Implementation of the ``md2overleaf export`` command."""

from __future__ import annotations

import typer

from md2overleaf.api.service import ExportRequest, ExportResult, ExportService
from md2overleaf.core.exceptions import ExportError

from .._options import (
    DebugOption,
    NoteArgument,
    NoUploadOption,
    OpenOption,
    SettingsOption,
    UploadHostOption,
    VaultOption,
    VerbosityOption,
)
from ..diagnostics import CliEmitter
from ..state import configure_logging, debug_enabled, emit_error, get_cli_state, set_cli_state
from ..utils import find_vault_root, settings_store


_SERVICE = ExportService()


def _present_result(result: ExportResult) -> None:
    state = get_cli_state()
    events, warnings = state.consume_events()
    console = state.console
    console.print(f"[bold]Archive:[/] {result.archive_path}")

    drawings = len(events.get("drawing_exported", []))
    if drawings:
        console.print(f"Exported {drawings} drawing(s).")
    if "upload_no_url" in events:
        console.print("No download link recognised; upload the archive manually.")
    if result.deep_link and not result.opened:
        console.print("Upload complete.")
        typer.echo(result.deep_link)
    if warnings:
        console.print(f"[yellow]Finished with {len(warnings)} warning(s).[/]")


def export(
    note: NoteArgument = None,
    vault: VaultOption = None,
    settings_path: SettingsOption = None,
    upload_host: UploadHostOption = None,
    no_upload: NoUploadOption = False,
    open_link: OpenOption = None,
    verbose: VerbosityOption = 0,
    debug: DebugOption = False,
) -> None:
    """Convert NOTE to LaTeX, bundle it as a ZIP and open it in Overleaf."""
    set_cli_state(verbosity=verbose, debug=debug)
    configure_logging()
    emitter = CliEmitter()

    try:
        settings = settings_store(settings_path).load()
        if upload_host:
            settings = settings.model_copy(update={"upload_host": upload_host})
        request = ExportRequest(
            document=note,
            vault_root=vault or (find_vault_root(note) if note is not None else None),
            settings=settings,
            upload=not no_upload,
            open_link=open_link,
            emitter=emitter,
        )
        result = _SERVICE.export(request)
    except ExportError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    _present_result(result)


__all__ = ["export"]
