"""Narration formatting for converted plain text.

Responsibilities:
- Reflow converted prose into one sentence per line.
- Protect decimal numbers and known abbreviations from false sentence breaks.
- Reduce header lines to standalone titles and isolate boundary markers.

Input is processed per paragraph (blocks separated by blank lines). Within a
paragraph, rules apply in this order:

1. Line breaks become spaces and whitespace runs collapse to one space.
2. Boundary markers and delimited header lines are cut out as standalone
   blocks, so they always start a new line.
3. For each prose block: spaces before `,` and `.` are removed, decimal
   periods and abbreviation periods are replaced by `PROTECTED_PERIOD`, a
   line break replaces the spaces after `.`, `!` or `?` when an uppercase
   letter follows, and protected periods are restored.

Blocks are joined by one blank line. The sentence-break heuristic is
deliberately simple: it splits after ordinary initials (`J. Smith`) and does
not split before lowercase or quoted sentence starts.

Idempotence holds except for header titles that contain a sentence break
(`Why Narrate? A Study`): the title is emitted without delimiters, so a
second pass splits it like prose.
"""

from __future__ import annotations

import re

from .abbreviations import DEFAULT_ABBREVIATIONS, AbbreviationSet
from .markers import BOUNDARY_MARKER, HEADER_DELIMITERS

PROTECTED_PERIOD = "\ue00f"

_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")
_DECIMAL_PERIOD_RE = re.compile(r"(?<=\d)\.(?=\d)")
_SENTENCE_BREAK_RE = re.compile(r"([.!?]) +(?=[A-Z])")
_SPACE_BEFORE_PUNCTUATION_RE = re.compile(r" +(?=[,.])")
_STRAY_DELIMITER_RE = re.compile("[" + "".join(HEADER_DELIMITERS.values()) + "]")
_SEGMENT_RE = re.compile(
    "("
    + re.escape(BOUNDARY_MARKER)
    + "".join(
        f"|{delimiter}[^{delimiter}]*{delimiter}" for delimiter in HEADER_DELIMITERS.values()
    )
    + ")"
)


class NarrationFormatter:
    """Reflow plain text into narration-ready sentence-per-line form."""

    def __init__(self, abbreviations: AbbreviationSet = DEFAULT_ABBREVIATIONS) -> None:
        """Initialize with the default abbreviation table for `format` calls."""

        self.abbreviations = abbreviations

    def format(self, text: str, abbreviations: AbbreviationSet | None = None) -> str:
        """Return the formatted stream for `text`.

        Output is a pure function of `text` and the abbreviation table, and
        formatting already formatted text returns it unchanged apart from the
        header-title case noted above.
        """

        active = abbreviations if abbreviations is not None else self.abbreviations
        normalized = (
            text.replace(PROTECTED_PERIOD, "").replace("\r\n", "\n").replace("\r", "\n")
        )
        blocks: list[str] = []
        for paragraph in _PARAGRAPH_BREAK_RE.split(normalized):
            blocks.extend(self._format_paragraph(paragraph, active))
        if not blocks:
            return ""
        return "\n\n".join(blocks) + "\n"

    def _format_paragraph(self, paragraph: str, abbreviations: AbbreviationSet) -> list[str]:
        """Split one flattened paragraph into marker, title and prose blocks."""

        flat = " ".join(paragraph.split())
        if not flat:
            return []

        blocks: list[str] = []
        for segment in _SEGMENT_RE.split(flat):
            if segment == BOUNDARY_MARKER:
                blocks.append(BOUNDARY_MARKER)
                continue
            title = self._header_title(segment)
            if title is not None:
                if title:
                    blocks.append(title)
                continue
            prose = self._reflow(segment, abbreviations)
            if prose:
                blocks.append(prose)
        return blocks

    def _header_title(self, segment: str) -> str | None:
        """Return the stripped title for a delimited header segment, else `None`."""

        if len(segment) < 2 or segment[0] != segment[-1]:
            return None
        if segment[0] not in HEADER_DELIMITERS.values():
            return None
        title = " ".join(segment[1:-1].split())
        return _SPACE_BEFORE_PUNCTUATION_RE.sub("", title)

    def _reflow(self, prose: str, abbreviations: AbbreviationSet) -> str:
        """Apply punctuation spacing, protection and sentence breaks to prose."""

        prose = " ".join(_STRAY_DELIMITER_RE.sub("", prose).split())
        if not prose:
            return ""
        prose = _SPACE_BEFORE_PUNCTUATION_RE.sub("", prose)
        prose = _DECIMAL_PERIOD_RE.sub(PROTECTED_PERIOD, prose)
        prose = abbreviations.protect(prose, PROTECTED_PERIOD)
        prose = _SENTENCE_BREAK_RE.sub("\\1\n", prose)
        return prose.replace(PROTECTED_PERIOD, ".")
