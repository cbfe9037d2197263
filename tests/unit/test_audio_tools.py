"""Unit tests for `say` synthesis and `ffmpeg` transcoding wrappers."""

from __future__ import annotations

from pathlib import Path
import subprocess

import pytest
from pytest import MonkeyPatch

from texvoice.audio.synthesizer import SaySynthesizer
from texvoice.audio.transcoder import FfmpegTranscoder
from texvoice.errors import PipelineStageError


def test_say_synthesizer_passes_speed_voice_and_paths(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """`say` should receive rate, optional voice, input file and output file."""

    calls: list[list[str]] = []

    def _run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        _ = kwargs
        calls.append(command)
        return subprocess.CompletedProcess(args=command, returncode=0, stdout="", stderr="")

    monkeypatch.setenv("TEXVOICE_SAY_BIN", "say")
    monkeypatch.setattr(subprocess, "run", _run)
    text_path = tmp_path / "section_01.txt"
    output_path = tmp_path / "audio" / "section_01.aiff"

    result = SaySynthesizer(voice=" Daniel ").synthesize(text_path, output_path, 175)

    assert result == output_path
    assert output_path.parent.is_dir()
    assert calls == [
        ["say", "-r", "175", "-v", "Daniel", "-f", str(text_path), "-o", str(output_path)]
    ]


def test_say_synthesizer_omits_voice_flag_by_default(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """Without a voice, the system default voice is used."""

    calls: list[list[str]] = []

    def _run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        _ = kwargs
        calls.append(command)
        return subprocess.CompletedProcess(args=command, returncode=0)

    monkeypatch.setenv("TEXVOICE_SAY_BIN", "say")
    monkeypatch.setattr(subprocess, "run", _run)

    SaySynthesizer().synthesize(tmp_path / "a.txt", tmp_path / "a.aiff", 200)

    assert "-v" not in calls[0]
    assert calls[0][1:3] == ["-r", "200"]


def test_say_synthesizer_maps_missing_tool_to_stage_error(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """A missing `say` binary is a synthesize-stage error with a hint."""

    def _run(*args: object, **kwargs: object) -> subprocess.CompletedProcess[str]:
        _ = (args, kwargs)
        raise FileNotFoundError("say")

    monkeypatch.setattr(subprocess, "run", _run)

    with pytest.raises(PipelineStageError) as exc_info:
        SaySynthesizer().synthesize(tmp_path / "a.txt", tmp_path / "a.aiff", 175)

    assert exc_info.value.stage == "synthesize"
    assert "--no-audio" in (exc_info.value.hint or "")


def test_ffmpeg_transcoder_passes_bitrate_through(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """`ffmpeg` should overwrite output, drop video and use the given bitrate."""

    calls: list[list[str]] = []

    def _run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        _ = kwargs
        calls.append(command)
        return subprocess.CompletedProcess(args=command, returncode=0)

    monkeypatch.setenv("TEXVOICE_FFMPEG_BIN", "ffmpeg")
    monkeypatch.setattr(subprocess, "run", _run)
    source = tmp_path / "section_01.aiff"
    target = tmp_path / "section_01.mp3"

    assert FfmpegTranscoder().transcode(source, target, "192k") == target
    command = calls[0]
    assert command[0] == "ffmpeg"
    assert "-y" in command
    assert command[command.index("-i") + 1] == str(source)
    assert command[command.index("-b:a") + 1] == "192k"
    assert command[-2:] == ["-vn", str(target)]


def test_ffmpeg_transcoder_maps_process_failure_to_stage_error(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """Non-zero ffmpeg exits are transcode-stage errors carrying stderr."""

    def _run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        _ = kwargs
        raise subprocess.CalledProcessError(1, command, stderr="Unknown encoder 'libmp3lame'")

    monkeypatch.setattr(subprocess, "run", _run)

    with pytest.raises(PipelineStageError) as exc_info:
        FfmpegTranscoder().transcode(tmp_path / "a.aiff", tmp_path / "a.mp3", "256k")

    assert exc_info.value.stage == "transcode"
    assert "Unknown encoder" in exc_info.value.detail
