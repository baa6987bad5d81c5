"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from pathlib import Path

from md2overleaf.core.settings_store import SettingsStore


VAULT_MARKER = ".obsidian"


def find_vault_root(note: Path) -> Path:
    """Return the nearest parent of ``note`` that looks like an Obsidian vault."""
    for parent in note.parents:
        if (parent / VAULT_MARKER).is_dir():
            return parent
    return note.parent


def settings_store(path: Path | None) -> SettingsStore:
    return SettingsStore(path) if path is not None else SettingsStore.default()


__all__ = ["VAULT_MARKER", "find_vault_root", "settings_store"]
