"""Unit tests for the pandoc plain-text conversion wrapper."""

from __future__ import annotations

import subprocess

import pytest
from pytest import MonkeyPatch

from texvoice.io.pandoc_converter import PandocConverter, PlainTextConversionError


def _completed(
    returncode: int, stdout: bytes = b"", stderr: bytes = b""
) -> subprocess.CompletedProcess[bytes]:
    return subprocess.CompletedProcess(args=["pandoc"], returncode=returncode, stdout=stdout, stderr=stderr)


def test_convert_pipes_latex_to_pandoc_plain_writer(monkeypatch: MonkeyPatch) -> None:
    """Converter should call pandoc with latex reader, plain writer and no wrapping."""

    calls: list[tuple[list[str], bytes]] = []

    def _run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        calls.append((command, kwargs["input"]))
        return _completed(0, stdout="Plain prose.\n".encode("utf-8"))

    monkeypatch.setenv("TEXVOICE_PANDOC_BIN", "/opt/pandoc")
    monkeypatch.setattr(subprocess, "run", _run)

    output = PandocConverter().convert("\\emph{Plain} prose.")

    assert output == "Plain prose.\n"
    command, payload = calls[0]
    assert command == ["/opt/pandoc", "-s", "-f", "latex", "-t", "plain", "--wrap=none"]
    assert payload == "\\emph{Plain} prose.".encode("utf-8")


def test_convert_maps_missing_binary_to_conversion_error(monkeypatch: MonkeyPatch) -> None:
    """A missing pandoc executable is reported as a conversion error."""

    def _run(*args: object, **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        _ = (args, kwargs)
        raise FileNotFoundError("pandoc")

    monkeypatch.setattr(subprocess, "run", _run)

    with pytest.raises(PlainTextConversionError, match="`pandoc` command is required"):
        PandocConverter().convert("text")


def test_convert_maps_non_zero_exit_with_stderr(monkeypatch: MonkeyPatch) -> None:
    """Pandoc failures carry their stderr text."""

    monkeypatch.setattr(
        subprocess,
        "run",
        lambda *args, **kwargs: _completed(64, stderr=b"Error at line 3: unexpected }"),
    )

    with pytest.raises(PlainTextConversionError, match="pandoc failed: Error at line 3"):
        PandocConverter().convert("\\section{")


def test_convert_rejects_empty_output_for_non_empty_input(monkeypatch: MonkeyPatch) -> None:
    """Blank output for a non-blank document is treated as a failure."""

    monkeypatch.setattr(subprocess, "run", lambda *args, **kwargs: _completed(0, stdout=b"\n"))

    with pytest.raises(PlainTextConversionError, match="no text"):
        PandocConverter().convert("Some text.")


def test_convert_accepts_empty_output_for_blank_input(monkeypatch: MonkeyPatch) -> None:
    """A blank document legitimately converts to blank output."""

    monkeypatch.setattr(subprocess, "run", lambda *args, **kwargs: _completed(0, stdout=b""))

    assert PandocConverter().convert("  \n") == ""
