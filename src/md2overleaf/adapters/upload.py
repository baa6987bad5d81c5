"""Upload the archive and compose the Overleaf deep link."""

from __future__ import annotations

import logging
from pathlib import Path
import re
from urllib.parse import quote

import click

from md2overleaf.core.config import DEFAULT_SEARCH_PATH
from md2overleaf.core.exceptions import UploadFailedError

from .process import failure_detail, run_tool


logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def host_name(host: str) -> str:
    """Return ``host`` without scheme or path, e.g. ``bashupload.app``."""
    stripped = _SCHEME_RE.sub("", host.strip())
    return stripped.split("/", 1)[0]


def url_pattern(host: str) -> re.Pattern[str]:
    """Return a matcher for download URLs served by ``host``."""
    return re.compile(rf"https?://{re.escape(host_name(host))}/\S+")


def extract_upload_url(output: str, host: str) -> str | None:
    """Return the first URL for ``host`` found in the upload output."""
    match = url_pattern(host).search(output)
    if match is None:
        return None
    return match.group(0).strip()


def upload_command(archive: Path, host: str) -> list[str]:
    return ["curl", host, "-T", archive.name]


def upload_archive(archive: Path, host: str, *, search_path: str = DEFAULT_SEARCH_PATH) -> str:
    """Stream ``archive`` to ``host`` with curl and return its standard output."""
    result = run_tool(
        upload_command(archive, host),
        cwd=archive.parent,
        description="upload",
        search_path=search_path,
    )
    if result.returncode != 0:
        detail = failure_detail(result)
        message = f"Upload exited with status {result.returncode}"
        if detail:
            message = f"{message}: {detail}"
        raise UploadFailedError(
            message,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
    return result.stdout or ""


def build_deep_link(editor_url: str, upload_url: str, engine: str, name: str) -> str:
    """Return the editor URL importing ``upload_url`` as project ``name``."""
    params = (("snip_uri", upload_url), ("engine", engine), ("name", name))
    query = "&".join(f"{key}={quote(value, safe='')}" for key, value in params)
    separator = "&" if "?" in editor_url else "?"
    return f"{editor_url}{separator}{query}"


def open_link(url: str) -> None:
    """Open ``url`` with the operator's default handler."""
    click.launch(url)


__all__ = [
    "build_deep_link",
    "extract_upload_url",
    "host_name",
    "open_link",
    "upload_archive",
    "upload_command",
    "url_pattern",
]
