"""Settings file management commands."""

from __future__ import annotations

from typing import Annotated

import typer
import yaml

from md2overleaf.core.config import Settings
from md2overleaf.core.exceptions import SettingsError

from .._options import SettingsOption
from ..state import emit_error, get_cli_state
from ..utils import settings_store


config_app = typer.Typer(
    help="Inspect or create the settings file.",
    no_args_is_help=True,
)


@config_app.command("init")
def init_settings(
    settings_path: SettingsOption = None,
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite an existing settings file.")
    ] = False,
) -> None:
    """Write the default settings to the settings file."""
    store = settings_store(settings_path)
    if store.exists() and not force:
        emit_error(f"Settings file '{store.path}' already exists (use --force to overwrite).")
        raise typer.Exit(code=1)
    try:
        path = store.save(Settings())
    except SettingsError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    get_cli_state().console.print(f"Wrote {path}")


@config_app.command("show")
def show_settings(settings_path: SettingsOption = None) -> None:
    """Print the effective settings, defaults included."""
    store = settings_store(settings_path)
    try:
        settings = store.load()
    except SettingsError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    source = store.path if store.exists() else "built-in defaults"
    typer.echo(f"# {source}")
    typer.echo(yaml.safe_dump(settings.model_dump(mode="json"), sort_keys=False).rstrip())


__all__ = ["config_app", "init_settings", "show_settings"]
