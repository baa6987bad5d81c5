"""Load and save the persisted settings record."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError
import yaml

from .config import Settings
from .exceptions import SettingsError


logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.yaml"


def resolve_settings_home(root: str | Path | None = None) -> Path:
    """Return the directory holding the settings file."""
    if root is not None:
        return Path(root).expanduser()
    env_root = os.environ.get("MD2OVERLEAF_HOME")
    if env_root:
        return Path(env_root).expanduser()
    return Path.home() / ".md2overleaf"


def default_settings_path() -> Path:
    """Return the settings file used when no explicit path is given."""
    return resolve_settings_home() / SETTINGS_FILENAME


@dataclass(slots=True)
class SettingsStore:
    """YAML-backed settings record merged over the built-in defaults."""

    path: Path

    @classmethod
    def default(cls) -> SettingsStore:
        return cls(default_settings_path())

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Settings:
        """Return stored settings, falling back to defaults for absent keys."""
        stored = self._read()
        try:
            return Settings.model_validate(stored)
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings in '{self.path}': {exc}") from exc

    def save(self, settings: Settings) -> Path:
        """Write the full settings record and return the file path."""
        payload = settings.model_dump(mode="json")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                yaml.safe_dump(payload, sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )
        except OSError as exc:
            raise SettingsError(f"Unable to write settings to '{self.path}': {exc}") from exc
        logger.debug("Saved settings to %s", self.path)
        return self.path

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.debug("No settings file at %s, using defaults", self.path)
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Unable to read settings from '{self.path}': {exc}") from exc
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(f"Settings file '{self.path}' is not valid YAML") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file '{self.path}' must contain a mapping")
        return data


__all__ = [
    "SETTINGS_FILENAME",
    "SettingsStore",
    "default_settings_path",
    "resolve_settings_home",
]
