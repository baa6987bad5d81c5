"""CLI command implementations exposed via ``md2overleaf.ui.cli``."""

from __future__ import annotations

from .config import config_app
from .export import export


__all__ = ["config_app", "export"]
