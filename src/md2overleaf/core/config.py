"""Configuration model used by the export pipeline.

Settings

`script_path` (`str`)
: Markdown to LaTeX converter. May contain the `${vault}` placeholder which
  is replaced by the vault root before the script is invoked.

`drawing_converter_path` (`str`)
: Tool turning a `.tldr` drawing into a PNG. Same placeholder rules as
  `script_path`.

`upload_host` (`str`)
: Upload endpoint handed to `curl`. The URL matcher applied to the upload
  output is derived from the same value so the two never disagree.

`auto_open` (`bool`)
: Open the Overleaf deep link once the upload succeeded.

`editor_url` (`str`)
: Base URL of the remote editor import endpoint.

`engine` (`str`)
: Rendering engine requested in the deep link.

`asset_dir` (`str`)
: Vault-relative folder holding images and embedded drawings.

`output_dir_name` (`str`)
: Folder, relative to the vault root, receiving one working directory per
  exported note.

`template_files` (`list[str]`)
: Shared LaTeX files copied from the vault root into every bundle. The file
  named `main.tex` gets its title and include directives patched.

`search_path` (`str`)
: Fixed `PATH` handed to external tools instead of the caller's shell
  configuration.

`output_timeout` (`float`)
: Seconds to wait for a file an external tool promised to produce.

`poll_interval` (`float`)
: Seconds between two existence checks while waiting.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


VAULT_PLACEHOLDER = "${vault}"

DEFAULT_SEARCH_PATH = "/opt/homebrew/bin:/usr/local/bin:/usr/bin:/bin:/usr/sbin:/sbin"


def expand_vault_path(template: str, vault_root: Path | str) -> str:
    """Replace the vault placeholder in ``template`` with ``vault_root``."""
    return template.replace(VAULT_PLACEHOLDER, str(vault_root))


class Settings(BaseModel):
    """Persisted export settings, read once at the start of each job."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    script_path: str = Field(default=f"{VAULT_PLACEHOLDER}/mdtex.sh", alias="scriptPath")
    drawing_converter_path: str = Field(
        default=f"{VAULT_PLACEHOLDER}/tldraw_convert.sh", alias="drawingConverterPath"
    )
    upload_host: str = Field(default="bashupload.app", alias="uploadHost")
    auto_open: bool = Field(default=True, alias="autoOpen")
    editor_url: str = Field(default="https://www.overleaf.com/docs", alias="editorUrl")
    engine: str = "xelatex"
    asset_dir: str = Field(default="pictures", alias="assetDir")
    output_dir_name: str = Field(default=".md2overleaf", alias="outputDirName")
    template_files: list[str] = Field(
        default_factory=lambda: ["config.tex", "main.tex"], alias="templateFiles"
    )
    search_path: str = Field(default=DEFAULT_SEARCH_PATH, alias="searchPath")
    output_timeout: float = Field(default=30.0, ge=0, alias="outputTimeout")
    poll_interval: float = Field(default=0.25, gt=0, alias="pollInterval")

    @field_validator("asset_dir")
    @classmethod
    def _normalise_asset_dir(cls, value: str) -> str:
        cleaned = value.replace("\\", "/").strip("/")
        if not cleaned:
            raise ValueError("asset_dir must name a folder")
        return cleaned

    @field_validator("upload_host", "engine")
    @classmethod
    def _require_value(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("value must not be empty")
        return cleaned

    def converter_command(self, vault_root: Path) -> str:
        """Return the converter executable with the vault placeholder expanded."""
        return expand_vault_path(self.script_path, vault_root)

    def drawing_converter_command(self, vault_root: Path) -> str:
        """Return the drawing converter executable with the placeholder expanded."""
        return expand_vault_path(self.drawing_converter_path, vault_root)


__all__ = [
    "DEFAULT_SEARCH_PATH",
    "Settings",
    "VAULT_PLACEHOLDER",
    "expand_vault_path",
]
