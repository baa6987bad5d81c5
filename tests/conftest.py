from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import subprocess
from typing import Any

import pytest

from md2overleaf.adapters import process as process_mod
from md2overleaf.core.config import Settings


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png"

MAIN_TEX = r"""\documentclass{article}
\input{config}
\title{Placeholder}
\begin{document}
\maketitle
\include{content}
\end{document}
"""

DRAWING_NOTE = """---
tags: [excalidraw]
---

```tldraw
{"shapes": [{"id": "shape:1", "type": "geo"}]}
```
"""


class FakeTools:
    """Stand-in for the converter, drawing converter and curl."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.tex: str | None = ""
        self.converter_returncode = 0
        self.converter_stderr = ""
        self.drawing_returncode = 0
        self.write_raster = True
        self.upload_returncode = 0
        self.upload_stdout = "Uploaded 1 file\n\nhttps://bashupload.app/abc123.zip\n"

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append({"cmd": list(cmd), **kwargs})
        program = Path(cmd[0]).name
        if program == "mdtex.sh":
            return self._convert(cmd, kwargs)
        if program == "tldraw_convert.sh":
            return self._draw(cmd)
        if program == "curl":
            return subprocess.CompletedProcess(
                cmd, self.upload_returncode, stdout=self.upload_stdout, stderr=""
            )
        raise AssertionError(f"Unexpected command: {cmd}")

    def commands(self, program: str) -> list[list[str]]:
        return [call["cmd"] for call in self.calls if Path(call["cmd"][0]).name == program]

    def _convert(self, cmd: list[str], kwargs: dict[str, Any]) -> subprocess.CompletedProcess[str]:
        if self.converter_returncode != 0:
            return subprocess.CompletedProcess(
                cmd, self.converter_returncode, stdout="", stderr=self.converter_stderr
            )
        if self.tex is not None:
            note = Path(cmd[2])
            base = note.name[: -len(".md")]
            target = Path(kwargs["cwd"]) / ".md2overleaf" / base / f"{base}.tex"
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.tex, encoding="utf-8")
        return subprocess.CompletedProcess(cmd, 0, stdout="converted\n", stderr="")

    def _draw(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        source = Path(cmd[1])
        assert source.exists(), "temporary drawing must exist while converting"
        if self.drawing_returncode != 0:
            return subprocess.CompletedProcess(
                cmd, self.drawing_returncode, stdout="", stderr="render failed"
            )
        if self.write_raster:
            Path(cmd[2]).write_bytes(PNG_BYTES)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    tools = FakeTools()
    monkeypatch.setattr(process_mod.subprocess, "run", tools)
    return tools


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    (root / ".obsidian").mkdir(parents=True)
    (root / "pictures").mkdir()
    (root / "main.tex").write_text(MAIN_TEX, encoding="utf-8")
    (root / "config.tex").write_text("\\usepackage{graphicx}\n", encoding="utf-8")
    return root


@pytest.fixture
def settings() -> Settings:
    return Settings(output_timeout=0, poll_interval=0.01)


@pytest.fixture
def write_note() -> Callable[..., Path]:
    def _write(root: Path, name: str = "Notes.md", text: str = "# Notes\n") -> Path:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
