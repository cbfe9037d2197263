"""Integration-test fixtures for deterministic external tool behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.fakes import fake_pandoc_plain
from texvoice.audio.synthesizer import SaySynthesizer
from texvoice.audio.transcoder import FfmpegTranscoder
from texvoice.io.pandoc_converter import PandocConverter


@pytest.fixture(autouse=True)
def _mock_external_tools(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace pandoc, say and ffmpeg calls so tests need no installed tools."""

    def _mock_convert(self, text: str) -> str:
        """Return approximate plain-writer output for the given LaTeX."""

        _ = self
        return fake_pandoc_plain(text)

    def _mock_synthesize(self, text_path: Path, output_path: Path, speed: int) -> Path:
        """Write a placeholder AIFF file."""

        _ = (self, text_path, speed)
        output_path.write_bytes(b"FORM")
        return output_path

    def _mock_transcode(self, source_path: Path, output_path: Path, bitrate: str) -> Path:
        """Write a placeholder MP3 file next to the source audio."""

        _ = (self, source_path, bitrate)
        output_path.write_bytes(b"ID3")
        return output_path

    monkeypatch.setattr(PandocConverter, "convert", _mock_convert)
    monkeypatch.setattr(SaySynthesizer, "synthesize", _mock_synthesize)
    monkeypatch.setattr(FfmpegTranscoder, "transcode", _mock_transcode)
