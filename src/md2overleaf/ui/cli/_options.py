"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
UPLOAD_PANEL = "Upload"
CONFIG_PANEL = "Configuration"
DIAGNOSTICS_PANEL = "Diagnostics"

NoteArgument = Annotated[
    Path | None,
    typer.Argument(
        metavar="NOTE",
        help="Markdown note to export.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

VaultOption = Annotated[
    Path | None,
    typer.Option(
        "--vault",
        help=(
            "Vault root holding the conversion scripts, templates and pictures. "
            "Defaults to the nearest parent containing '.obsidian'."
        ),
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

SettingsOption = Annotated[
    Path | None,
    typer.Option(
        "--settings",
        help="Settings file to use instead of ~/.md2overleaf/settings.yaml.",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=CONFIG_PANEL,
    ),
]

UploadHostOption = Annotated[
    str | None,
    typer.Option(
        "--upload-host",
        help="Override the upload endpoint from the settings.",
        rich_help_panel=UPLOAD_PANEL,
    ),
]

NoUploadOption = Annotated[
    bool,
    typer.Option(
        "--no-upload",
        help="Stop after writing the ZIP archive.",
        rich_help_panel=UPLOAD_PANEL,
    ),
]

OpenOption = Annotated[
    bool | None,
    typer.Option(
        "--open/--no-open",
        help="Open the Overleaf link after uploading (defaults to the autoOpen setting).",
        show_default=False,
        rich_help_panel=UPLOAD_PANEL,
    ),
]

VerbosityOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase diagnostic verbosity (repeat for more detail).",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks and debug logging.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
