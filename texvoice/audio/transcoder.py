"""Audio transcoding collaborators.

Responsibilities:
- Define the protocol for encoding synthesized speech into a delivery format.
- Provide an `ffmpeg` backed MP3 implementation with a pass-through bitrate.
"""

from __future__ import annotations

from pathlib import Path
import subprocess
from typing import Protocol

from ..errors import PipelineStageError
from ..parsing import normalize_optional_string
from ..runtime_tools import resolve_executable


class AudioTranscoder(Protocol):
    """Protocol for audio transcoder implementations."""

    def transcode(self, source_path: Path, output_path: Path, bitrate: str) -> Path:
        """Encode `source_path` into `output_path` and return the output path."""


class FfmpegTranscoder:
    """Encode speech audio with `ffmpeg`."""

    def transcode(self, source_path: Path, output_path: Path, bitrate: str) -> Path:
        """Encode one audio file at `bitrate`, overwriting existing output."""

        command = [
            resolve_executable("ffmpeg"),
            "-y",
            "-hide_banner",
            "-loglevel",
            "error",
            "-i",
            str(source_path),
            "-b:a",
            bitrate,
            "-vn",
            str(output_path),
        ]
        try:
            subprocess.run(command, check=True, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise PipelineStageError(
                stage="transcode",
                detail="Transcoding tool `ffmpeg` is not available on PATH.",
                hint="Install ffmpeg or rerun with `--no-audio` to keep text sections only.",
            ) from exc
        except subprocess.CalledProcessError as exc:
            stderr = normalize_optional_string(exc.stderr) or "no stderr output"
            raise PipelineStageError(
                stage="transcode",
                detail=f"ffmpeg failed for `{source_path.name}`: {stderr}",
                hint="Verify local ffmpeg MP3 support (`libmp3lame`).",
            ) from exc
        return output_path
