"""Rewrite converter output into a self-contained LaTeX document.

Pandoc wraps images in ``\\pandocbounded{\\includegraphics{...}}`` and lets
Obsidian drawing embeds (``![[pictures/Sketch.md]]``) leak through as escaped
brackets. Both are normalised to a plain ``\\includegraphics`` so the bundle
compiles on a stock TeX distribution.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import logging
from pathlib import Path
import re

from .models import AssetCopyTask, DrawingExportResult, DrawingReference


logger = logging.getLogger(__name__)

COMMENT_PREFIX = "% [md2overleaf]"

_TITLE_RE = re.compile(r"\\title\s*\{[^}]*\}")
_INCLUDE_RE = re.compile(r"\\include\s*\{[^}]*\}")
_SEPARATORS_RE = re.compile(r"[_-]+")
_WHITESPACE_RE = re.compile(r"\s+")
_EXTENSION_RE = re.compile(r"\.(?:tex|md)$", re.IGNORECASE)

_LATEX_SPECIALS = {
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "{": r"\{",
    "}": r"\}",
    "\\": r"\textbackslash{}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def bounded_image_pattern(asset_dir: str) -> re.Pattern[str]:
    """Match ``\\pandocbounded{\\includegraphics[...]{<asset_dir>/...}}``."""
    folder = re.escape(asset_dir)
    return re.compile(
        r"\\pandocbounded\{\s*\\includegraphics(?:\[[^\]]*\])?"
        rf"\{{({folder}[/\\][^}}]+)\}}\s*\}}"
    )


def drawing_embed_pattern(asset_dir: str) -> re.Pattern[str]:
    """Match the escaped ``![[<asset_dir>/....md]]`` embed left by the converter."""
    folder = re.escape(asset_dir)
    return re.compile(rf"!\{{\[\}}\{{\[\}}({folder}/[^{{}}]+?\.md)\{{\]\}}\{{\]\}}")


def include_graphics(relative_path: str) -> str:
    """Return the canonical full-width image directive."""
    return f"\\includegraphics[width=\\linewidth]{{{relative_path}}}"


def missing_drawing_comment(relative_path: str) -> str:
    """Return the placeholder inserted when a drawing could not be exported."""
    return f"{COMMENT_PREFIX} missing drawing export for {relative_path}\n"


@dataclass(slots=True)
class RewriteResult:
    """Rewritten LaTeX plus the work collected while rewriting it."""

    text: str
    copy_tasks: list[AssetCopyTask] = field(default_factory=list)
    drawings: list[DrawingReference] = field(default_factory=list)


def rewrite_references(text: str, vault_root: Path, asset_dir: str = "pictures") -> RewriteResult:
    """Normalise bounded images and collect drawing embeds.

    Drawing embeds are collected before the image substitution runs. They are
    later replaced by content, not by offset, so the length changes made here
    cannot invalidate them.
    """
    drawings = [
        DrawingReference(text=match.group(0), relative_path=match.group(1).strip())
        for match in drawing_embed_pattern(asset_dir).finditer(text)
    ]

    copy_tasks: list[AssetCopyTask] = []

    def _replace(match: re.Match[str]) -> str:
        relative = match.group(1).strip().replace("\\", "/")
        copy_tasks.append(AssetCopyTask(source=vault_root / relative, archive_path=relative))
        return include_graphics(relative)

    rewritten = bounded_image_pattern(asset_dir).sub(_replace, text)
    logger.debug(
        "Rewrote %d bounded image(s), found %d drawing embed(s)", len(copy_tasks), len(drawings)
    )
    return RewriteResult(text=rewritten, copy_tasks=copy_tasks, drawings=drawings)


def substitute_drawings(
    text: str,
    drawings: list[DrawingReference],
    export: Callable[[str], DrawingExportResult | None],
) -> tuple[str, list[str]]:
    """Replace drawing embeds with images or comments.

    ``export`` receives the vault-relative note path and is called once per
    distinct drawing. Returns the new text and the drawings that failed.
    """
    results: dict[str, DrawingExportResult | None] = {}
    failed: list[str] = []
    for reference in drawings:
        relative = reference.relative_path
        if relative not in results:
            results[relative] = export(relative)
            if results[relative] is None:
                failed.append(relative)
        exported = results[relative]
        if exported is not None:
            replacement = include_graphics(exported.relative_path)
        else:
            replacement = missing_drawing_comment(relative)
        text = text.replace(reference.text, replacement, 1)
    return text, failed


def derive_title(base_name: str) -> str:
    """Turn a file name such as ``My_Great-Paper`` into ``My Great Paper``."""
    stem = _EXTENSION_RE.sub("", base_name)
    spaced = _SEPARATORS_RE.sub(" ", stem)
    return _WHITESPACE_RE.sub(" ", spaced).strip()


def escape_latex(value: str) -> str:
    return "".join(_LATEX_SPECIALS.get(char, char) for char in value)


def patch_main_document(text: str, title: str, include_name: str) -> str:
    """Point the first ``\\title`` and ``\\include`` directives at the export."""
    title_directive = f"\\title{{{escape_latex(title)}}}"
    include_directive = f"\\include{{{include_name}}}"
    text = _TITLE_RE.sub(lambda _match: title_directive, text, count=1)
    return _INCLUDE_RE.sub(lambda _match: include_directive, text, count=1)


__all__ = [
    "COMMENT_PREFIX",
    "RewriteResult",
    "bounded_image_pattern",
    "derive_title",
    "drawing_embed_pattern",
    "escape_latex",
    "include_graphics",
    "missing_drawing_comment",
    "patch_main_document",
    "rewrite_references",
    "substitute_drawings",
]
