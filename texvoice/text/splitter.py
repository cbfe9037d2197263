"""Section splitting on boundary markers.

Responsibilities:
- Partition the formatted stream into ordered section buffers.
- Keep pre-division content as buffer 0 instead of discarding it.
- Report malformed marker streams as warnings without stopping the split.

Titles captured from raw LaTeX are only counted, never compared as text:
pandoc rewrites escapes, ties and math inside them.
"""

from __future__ import annotations

from typing import Sequence

from ..models.datatypes import MarkerStreamWarning, SectionBuffer, SplitReport
from .markers import BOUNDARY_MARKER


class SectionSplitter:
    """Split a formatted stream into section buffers.

    Every marker occurrence starts a new buffer, so a stream with N markers
    yields N+1 buffers. Empty buffers are emitted as well; discarding them is
    left to the section writer.
    """

    def __init__(self, marker: str = BOUNDARY_MARKER) -> None:
        """Initialize the splitter with the marker token to split on."""

        self.marker = marker

    def split(self, stream: str) -> list[SectionBuffer]:
        """Split `stream` into buffers, ignoring diagnostics."""

        return list(self.split_with_report(stream).buffers)

    def split_with_report(
        self,
        stream: str,
        expected_titles: Sequence[str] | None = None,
    ) -> SplitReport:
        """Split `stream` and compare the division count with `expected_titles`."""

        warnings: list[MarkerStreamWarning] = []
        groups: list[list[str]] = [[]]
        for line_number, line in enumerate(stream.splitlines(), start=1):
            if self.marker not in line:
                groups[-1].append(line)
                continue
            pieces = line.split(self.marker)
            if any(piece.strip() for piece in pieces):
                warnings.append(
                    MarkerStreamWarning(reason="marker_not_standalone", line_number=line_number)
                )
            if pieces[0].strip():
                groups[-1].append(pieces[0].rstrip())
            for piece in pieces[1:]:
                groups.append([piece.strip()] if piece.strip() else [])

        buffers: list[SectionBuffer] = []
        for index, group in enumerate(groups):
            lines = _trim_blank_edges(group)
            title = None
            if index > 0:
                title = next((line.strip() for line in lines if line.strip()), None)
                if title is None:
                    warnings.append(MarkerStreamWarning(reason="missing_title", section_index=index))
            buffers.append(SectionBuffer(index=index, title=title, lines=tuple(lines)))

        if expected_titles is not None and len(buffers) - 1 != len(expected_titles):
            warnings.append(MarkerStreamWarning(reason="marker_count_mismatch"))
        return SplitReport(buffers=tuple(buffers), warnings=tuple(warnings))


def _trim_blank_edges(lines: list[str]) -> list[str]:
    """Drop leading and trailing blank lines."""

    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]
