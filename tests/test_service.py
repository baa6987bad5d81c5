from __future__ import annotations

from pathlib import Path
import zipfile

import pytest

from md2overleaf.api import ExportRequest, ExportService
from md2overleaf.core.config import Settings
from md2overleaf.core.exceptions import (
    ConversionFailedError,
    NoActiveDocumentError,
    OutputTimeoutError,
    StagingError,
    UploadFailedError,
)

from conftest import DRAWING_NOTE, PNG_BYTES


CONVERTED = (
    "\\section{Notes}\n"
    "\\pandocbounded{\\includegraphics[keepaspectratio]{pictures/diagram.png}}\n"
    "A drawing: !{[}{[}pictures/Sketch.md{]}{]}\n"
)


class RecordingEmitter:

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.events: list[str] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        raise AssertionError(message)

    def event(self, name: str, payload) -> None:
        self.events.append(name)


@pytest.fixture
def opened() -> list[str]:
    return []


@pytest.fixture
def service(opened: list[str]) -> ExportService:
    return ExportService(opener=opened.append)


@pytest.fixture
def prepared(vault: Path, write_note, fake_tools) -> Path:
    (vault / "pictures" / "diagram.png").write_bytes(b"\x89PNG-diagram")
    (vault / "pictures" / "Sketch.md").write_text(DRAWING_NOTE, encoding="utf-8")
    fake_tools.tex = CONVERTED
    return write_note(vault, "Notes.md")


def test_end_to_end_export(
    service: ExportService, vault: Path, prepared: Path, settings: Settings, fake_tools, opened
) -> None:
    emitter = RecordingEmitter()

    result = service.export(
        ExportRequest(document=prepared, vault_root=vault, settings=settings, emitter=emitter)
    )

    assert result.archive_path == vault.resolve() / ".md2overleaf" / "Notes" / "Notes.zip"
    with zipfile.ZipFile(result.archive_path) as archive:
        assert sorted(archive.namelist()) == [
            "Notes.tex",
            "config.tex",
            "main.tex",
            "pictures/Sketch.png",
            "pictures/diagram.png",
        ]
        tex = archive.read("Notes.tex").decode("utf-8")
        main = archive.read("main.tex").decode("utf-8")
        assert archive.read("pictures/diagram.png") == b"\x89PNG-diagram"
        assert archive.read("pictures/Sketch.png") == PNG_BYTES

    assert "\\includegraphics[width=\\linewidth]{pictures/diagram.png}" in tex
    assert "\\includegraphics[width=\\linewidth]{pictures/Sketch.png}" in tex
    assert "pandocbounded" not in tex
    assert "!{[}" not in tex
    assert "\\title{Notes}" in main
    assert "\\include{Notes}" in main

    assert result.upload_url == "https://bashupload.app/abc123.zip"
    assert result.deep_link == (
        "https://www.overleaf.com/docs?snip_uri=https%3A%2F%2Fbashupload.app%2Fabc123.zip"
        "&engine=xelatex&name=Notes"
    )
    assert opened == [result.deep_link]
    assert result.opened
    assert result.missing_assets == []
    assert result.failed_drawings == []
    assert emitter.events == [
        "conversion_complete",
        "drawing_exported",
        "archive_written",
        "upload_started",
        "deep_link",
        "opening_editor",
    ]
    assert [Path(cmd[0]).name for cmd in (call["cmd"] for call in fake_tools.calls)] == [
        "mdtex.sh",
        "tldraw_convert.sh",
        "curl",
    ]


def test_degraded_export_keeps_going(
    service: ExportService, vault: Path, prepared: Path, settings: Settings, fake_tools
) -> None:
    (vault / "pictures" / "diagram.png").unlink()
    (vault / "pictures" / "Sketch.md").write_text("# just text\n", encoding="utf-8")
    emitter = RecordingEmitter()

    result = service.export(
        ExportRequest(
            document=prepared, vault_root=vault, settings=settings, upload=False, emitter=emitter
        )
    )

    assert sorted(result.entries) == ["Notes.tex", "config.tex", "main.tex"]
    tex = result.tex_path.read_text(encoding="utf-8")
    assert "\\includegraphics[width=\\linewidth]{pictures/diagram.png}" in tex
    assert "% [md2overleaf] missing drawing export for pictures/Sketch.md" in tex
    assert "pictures/Sketch.png" not in tex
    assert result.failed_drawings == ["pictures/Sketch.md"]
    assert result.missing_assets == [vault.resolve() / "pictures" / "diagram.png"]
    assert len(emitter.warnings) == 2
    assert fake_tools.commands("curl") == []
    assert result.upload_url is None


def test_stage_is_rebuilt_each_run(
    service: ExportService, vault: Path, prepared: Path, settings: Settings, fake_tools
) -> None:
    request = ExportRequest(document=prepared, vault_root=vault, settings=settings, upload=False)
    first = service.export(request)
    stale = first.job.stage_root / "pictures" / "stale.png"
    stale.write_bytes(b"stale")

    second = service.export(request)

    assert not stale.exists()
    assert "pictures/stale.png" not in second.entries


def test_no_url_in_upload_output(
    service: ExportService, vault: Path, prepared: Path, settings: Settings, fake_tools, opened
) -> None:
    fake_tools.upload_stdout = "something went sideways\n"
    emitter = RecordingEmitter()

    result = service.export(
        ExportRequest(document=prepared, vault_root=vault, settings=settings, emitter=emitter)
    )

    assert result.upload_url is None
    assert result.deep_link is None
    assert opened == []
    assert emitter.events[-1] == "upload_no_url"
    assert result.archive_path.exists()


def test_auto_open_disabled(
    service: ExportService, vault: Path, prepared: Path, fake_tools, opened
) -> None:
    settings = Settings(output_timeout=0, auto_open=False)

    result = service.export(ExportRequest(document=prepared, vault_root=vault, settings=settings))

    assert result.deep_link is not None
    assert not result.opened
    assert opened == []


def test_configured_upload_host_is_used(
    service: ExportService, vault: Path, prepared: Path, fake_tools
) -> None:
    settings = Settings(output_timeout=0, upload_host="upload.example")
    fake_tools.upload_stdout = "done: http://upload.example/abc123 (1.2MB)"

    result = service.export(
        ExportRequest(document=prepared, vault_root=vault, settings=settings, open_link=False)
    )

    assert fake_tools.commands("curl") == [["curl", "upload.example", "-T", "Notes.zip"]]
    assert result.upload_url == "http://upload.example/abc123"


def test_missing_document(service: ExportService, vault: Path, settings: Settings) -> None:
    with pytest.raises(NoActiveDocumentError):
        service.export(ExportRequest(document=None, vault_root=vault, settings=settings))


def test_conversion_failure_aborts(
    service: ExportService, vault: Path, prepared: Path, settings: Settings, fake_tools
) -> None:
    fake_tools.converter_returncode = 1
    fake_tools.converter_stderr = "boom"

    with pytest.raises(ConversionFailedError):
        service.export(ExportRequest(document=prepared, vault_root=vault, settings=settings))

    assert len(fake_tools.calls) == 1
    assert not (vault / ".md2overleaf" / "Notes" / "Notes.zip").exists()


def test_missing_template_aborts(
    service: ExportService, vault: Path, prepared: Path, settings: Settings, fake_tools
) -> None:
    (vault / "config.tex").unlink()

    with pytest.raises(StagingError):
        service.export(ExportRequest(document=prepared, vault_root=vault, settings=settings))

    assert fake_tools.commands("curl") == []


def test_upload_failure_aborts(
    service: ExportService, vault: Path, prepared: Path, settings: Settings, fake_tools, opened
) -> None:
    fake_tools.upload_returncode = 7

    with pytest.raises(UploadFailedError):
        service.export(ExportRequest(document=prepared, vault_root=vault, settings=settings))

    assert opened == []


def test_previous_latex_is_not_reused(
    service: ExportService, vault: Path, prepared: Path, settings: Settings, fake_tools
) -> None:
    request = ExportRequest(document=prepared, vault_root=vault, settings=settings, upload=False)
    fake_tools.tex = "FRESH\n"
    first = service.export(request)
    assert first.tex_path.read_text(encoding="utf-8") == "FRESH\n"

    fake_tools.tex = None

    with pytest.raises(OutputTimeoutError):
        service.export(request)

    assert not first.job.tex_path.exists()


@pytest.mark.parametrize("name", ["main.md", "config.md", "Main.md"])
def test_note_named_like_a_template_is_rejected(
    service: ExportService, vault: Path, write_note, settings: Settings, fake_tools, name: str
) -> None:
    note = write_note(vault, name, "BODY\n")

    with pytest.raises(StagingError, match="would overwrite template"):
        service.export(ExportRequest(document=note, vault_root=vault, settings=settings))

    assert fake_tools.calls == []
    assert "\\documentclass" in (vault / "main.tex").read_text(encoding="utf-8")
