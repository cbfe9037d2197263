"""Core datatypes shared across texvoice modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Provide explicit typing for reproducibility and serialization.

Key types:
- `SourceDocument`, `InsertionReport`, `SectionBuffer`, `SplitReport`,
  `SectionArtifact`, `AudioArtifact`, and `RunManifest`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Raw LaTeX source read once from disk.

    Attributes:
        path: Path the document was read from.
        text: Unmodified document text.
    """

    path: Path
    text: str


@dataclass(frozen=True, slots=True)
class InsertionReport:
    """Structured output of marker insertion and markup removal.

    Attributes:
        text: Cleaned LaTeX with boundary markers and header lines injected.
        division_titles: Top-level division titles in source order.
        removed_environments: Number of removed block environments.
        removed_references: Number of removed citation/reference/label commands.
    """

    text: str
    division_titles: tuple[str, ...]
    removed_environments: int
    removed_references: int


@dataclass(frozen=True, slots=True)
class SectionBuffer:
    """Ordered lines belonging to one division.

    Attributes:
        index: 0 for content before the first division, 1..N for divisions.
        title: Division title line, or `None` for the preamble or a missing title.
        lines: Section lines without the boundary marker.
    """

    index: int
    title: str | None
    lines: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        """Return whether the buffer holds no narratable line."""

        return not any(line.strip() for line in self.lines)

    @property
    def text(self) -> str:
        """Render buffer lines as newline-terminated plain text."""

        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


@dataclass(frozen=True, slots=True)
class MarkerStreamWarning:
    """One malformed marker stream observation.

    Attributes:
        reason: Machine-readable reason code.
        section_index: Affected section buffer, when known.
        line_number: 1-based formatted stream line, when known.
    """

    reason: str
    section_index: int | None = None
    line_number: int | None = None

    def describe(self) -> str:
        """Render the warning as one deterministic text token list."""

        parts = [self.reason]
        if self.section_index is not None:
            parts.append(f"section={self.section_index}")
        if self.line_number is not None:
            parts.append(f"line={self.line_number}")
        return " ".join(parts)


@dataclass(frozen=True, slots=True)
class SplitReport:
    """Section splitter output with malformed-stream diagnostics."""

    buffers: tuple[SectionBuffer, ...]
    warnings: tuple[MarkerStreamWarning, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class SectionArtifact:
    """A section buffer written to disk."""

    index: int
    title: str | None
    path: Path
    line_count: int


@dataclass(frozen=True, slots=True)
class AudioArtifact:
    """Encoded audio produced for one written section."""

    index: int
    path: Path
    source_text_path: Path
    bitrate: str
    speed: int


@dataclass(frozen=True, slots=True)
class RunManifest:
    """Deterministic record of a texvoice pipeline run.

    Attributes:
        run_id: Stable run identifier.
        source_tex: Input document path.
        output_dir: Directory holding all run outputs.
        sections: Written section artifacts in index order.
        discarded_sections: Indices of empty buffers that were not written.
        audio: Audio artifacts, empty when synthesis was skipped.
        warnings: Malformed marker stream diagnostics.
        extra: Additional implementation-specific metadata.
    """

    run_id: str
    source_tex: Path
    output_dir: Path
    sections: tuple[SectionArtifact, ...]
    discarded_sections: tuple[int, ...] = field(default_factory=tuple)
    audio: tuple[AudioArtifact, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)
    extra: Mapping[str, str] = field(default_factory=dict)
