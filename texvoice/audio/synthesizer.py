"""Speech synthesis collaborators.

Responsibilities:
- Define the protocol for turning one section text file into speech audio.
- Provide a macOS `say` backed implementation.
"""

from __future__ import annotations

from pathlib import Path
import subprocess
from typing import Protocol

from ..errors import PipelineStageError
from ..parsing import normalize_optional_string
from ..runtime_tools import resolve_executable


class SpeechSynthesizer(Protocol):
    """Protocol for speech synthesizer implementations."""

    def synthesize(self, text_path: Path, output_path: Path, speed: int) -> Path:
        """Synthesize speech for one text file and return the audio path."""


class SaySynthesizer:
    """Synthesizer writing AIFF files with the `say` command."""

    def __init__(self, voice: str | None = None) -> None:
        """Initialize with an optional `say` voice name."""

        self.voice = normalize_optional_string(voice)

    def synthesize(self, text_path: Path, output_path: Path, speed: int) -> Path:
        """Run `say` for one section file at `speed` words per minute."""

        command = [resolve_executable("say"), "-r", str(speed)]
        if self.voice is not None:
            command.extend(["-v", self.voice])
        command.extend(["-f", str(text_path), "-o", str(output_path)])

        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            subprocess.run(command, check=True, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise PipelineStageError(
                stage="synthesize",
                detail="Speech tool `say` is not available on PATH.",
                hint=(
                    "Run on macOS, point `TEXVOICE_SAY_BIN` at a compatible tool, "
                    "or rerun with `--no-audio`."
                ),
            ) from exc
        except subprocess.CalledProcessError as exc:
            stderr = normalize_optional_string(exc.stderr) or "no stderr output"
            raise PipelineStageError(
                stage="synthesize",
                detail=f"say failed for `{text_path.name}`: {stderr}",
                hint="Check the configured voice with `say -v '?'`.",
            ) from exc
        return output_path
