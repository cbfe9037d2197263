"""Markup stripping and section boundary marker insertion.

Responsibilities:
- Remove non-narratable LaTeX constructs before plain-text conversion.
- Inject boundary markers and level-specific header lines at headings.
- Reserve sentinel code points so document text cannot forge a marker.

The Private Use Area code points U+E000..U+E00F are reserved for texvoice
sentinels. `StripReservedCharacters` always runs first.
"""

from __future__ import annotations

import re
from typing import Protocol

from ..models.datatypes import InsertionReport

RESERVED_CHARACTERS_RE = re.compile("[\ue000-\ue00f]")

BOUNDARY_MARKER = "\ue000TEXVOICESPLIT\ue000"

HEADER_DELIMITERS: dict[int, str] = {
    1: "\ue001",
    2: "\ue002",
    3: "\ue003",
}

_HEADING_LEVELS = {
    "section": 1,
    "subsection": 2,
    "subsubsection": 3,
}

REFERENCE_COMMANDS = (
    "cite",
    "citep",
    "citet",
    "citealt",
    "citealp",
    "citeauthor",
    "citeyear",
    "citetitle",
    "parencite",
    "textcite",
    "autocite",
    "footcite",
    "smartcite",
    "supercite",
    "nocite",
    "ref",
    "eqref",
    "autoref",
    "cref",
    "Cref",
    "pageref",
    "nameref",
    "vref",
    "label",
)

BLOCK_ENVIRONMENTS = (
    "figure",
    "figure*",
    "table",
    "table*",
    "equation",
    "equation*",
    "align",
    "align*",
    "verbatim",
    "lstlisting",
)


def header_line(level: int, title: str) -> str:
    """Render one delimiter-wrapped header line for a heading level."""

    delimiter = HEADER_DELIMITERS[level]
    return f"{delimiter} {title} {delimiter}"


def read_group(text: str, start: int, opening: str = "{", closing: str = "}") -> int | None:
    """Return the index just past a balanced group opening at `start`.

    Backslash-escaped characters never count as delimiters. Returns `None`
    when `text[start]` is not `opening` or the group never closes.
    """

    if start >= len(text) or text[start] != opening:
        return None
    depth = 0
    index = start
    while index < len(text):
        character = text[index]
        if character == "\\":
            index += 2
            continue
        if character == opening:
            depth += 1
        elif character == closing:
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return None


def _skip_spaces(text: str, index: int) -> int:
    while index < len(text) and text[index] in " \t":
        index += 1
    return index


class MarkupRule(Protocol):
    """Protocol for marker-insertion rules."""

    def apply(self, text: str) -> str:
        """Apply a single markup transformation."""


class StripReservedCharacters:
    """Delete reserved sentinel code points from document text."""

    def apply(self, text: str) -> str:
        """Remove every reserved code point."""

        return RESERVED_CHARACTERS_RE.sub("", text)


class StripComments:
    """Remove LaTeX line comments, keeping escaped percent signs.

    A `%` is escaped only after an odd run of backslashes, so `\\\\%` is a
    line break followed by a comment. A comment takes its line break along
    unless the next line is blank.
    """

    _COMMENT_RE = re.compile(r"(?<!\\)((?:\\\\)*)%[^\n]*(?:\n(?![ \t]*(?:\n|$)))?")

    def apply(self, text: str) -> str:
        """Drop unescaped `%` comments."""

        return self._COMMENT_RE.sub(r"\1", text)


class RemoveReferences:
    """Remove citation, cross-reference and label commands with their arguments."""

    def __init__(self, commands: tuple[str, ...] = REFERENCE_COMMANDS) -> None:
        """Compile the command matcher for the given command names."""

        names = sorted(commands, key=len, reverse=True)
        self._command_re = re.compile(
            r"\\(?:" + "|".join(re.escape(name) for name in names) + r")(?![A-Za-z])\*?"
        )
        self.last_removed_count = 0

    def apply(self, text: str) -> str:
        """Remove each complete reference command; malformed ones stay untouched."""

        pieces: list[str] = []
        position = 0
        removed = 0
        for match in self._command_re.finditer(text):
            if match.start() < position:
                continue
            end = self._command_end(text, match.end())
            if end is None:
                continue
            pieces.append(text[position : match.start()])
            position = end
            removed += 1
        pieces.append(text[position:])
        self.last_removed_count = removed
        return "".join(pieces)

    def _command_end(self, text: str, index: int) -> int | None:
        """Return the end offset of up to two optional and one mandatory argument."""

        index = _skip_spaces(text, index)
        for _ in range(2):
            if index >= len(text) or text[index] != "[":
                break
            optional_end = read_group(text, index, "[", "]")
            if optional_end is None:
                return None
            index = _skip_spaces(text, optional_end)
        return read_group(text, index)


class RemoveBlockEnvironments:
    """Remove non-narratable environments from `\\begin` to the matching `\\end`.

    Same-name nesting is tracked with a depth counter. Environment content is
    not treated as opaque: a literal `\\end{figure}` inside a verbatim block
    nested in a figure closes that figure early.
    """

    def __init__(self, environments: tuple[str, ...] = BLOCK_ENVIRONMENTS) -> None:
        """Compile the begin/end token matcher for the given environments."""

        names = "|".join(re.escape(name) for name in environments)
        self._token_re = re.compile(
            r"\\(?P<kind>begin|end)\s*\{(?P<name>" + names + r")\}"
        )
        self.last_removed_count = 0

    def apply(self, text: str) -> str:
        """Remove every closed environment; unclosed ones stay untouched."""

        tokens = list(self._token_re.finditer(text))
        pieces: list[str] = []
        position = 0
        removed = 0
        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token.group("kind") != "begin" or token.start() < position:
                index += 1
                continue
            closing_index = self._matching_end(tokens, index)
            if closing_index is None:
                index += 1
                continue
            pieces.append(text[position : token.start()])
            position = tokens[closing_index].end()
            removed += 1
            index = closing_index + 1
        pieces.append(text[position:])
        self.last_removed_count = removed
        return "".join(pieces)

    def _matching_end(self, tokens: list[re.Match[str]], start: int) -> int | None:
        """Return the token index closing the environment opened at `start`."""

        name = tokens[start].group("name")
        depth = 0
        for index in range(start, len(tokens)):
            token = tokens[index]
            if token.group("name") != name:
                continue
            depth += 1 if token.group("kind") == "begin" else -1
            if depth == 0:
                return index
        return None


class RewriteHeadings:
    """Rewrite section headings to header lines, marking top-level divisions."""

    _HEADING_RE = re.compile(r"\\(?P<command>subsubsection|subsection|section)(?![A-Za-z])\*?")

    def __init__(self) -> None:
        """Initialize rule state with an empty title list."""

        self.last_division_titles: tuple[str, ...] = ()

    def apply(self, text: str) -> str:
        """Replace complete headings; malformed ones stay untouched."""

        pieces: list[str] = []
        titles: list[str] = []
        position = 0
        for match in self._HEADING_RE.finditer(text):
            if match.start() < position:
                continue
            parsed = self._parse_title(text, match.end())
            if parsed is None:
                continue
            title, end = parsed
            level = _HEADING_LEVELS[match.group("command")]
            pieces.append(text[position : match.start()])
            if level == 1:
                titles.append(title)
                pieces.append(f"\n\n{BOUNDARY_MARKER}\n\n{header_line(level, title)}\n\n")
            else:
                pieces.append(f"\n\n{header_line(level, title)}\n\n")
            position = end
        pieces.append(text[position:])
        self.last_division_titles = tuple(titles)
        return "".join(pieces)

    def _parse_title(self, text: str, index: int) -> tuple[str, int] | None:
        """Return the collapsed heading title and the end offset of the command."""

        index = _skip_spaces(text, index)
        if index < len(text) and text[index] == "[":
            short_end = read_group(text, index, "[", "]")
            if short_end is None:
                return None
            index = _skip_spaces(text, short_end)
        end = read_group(text, index)
        if end is None:
            return None
        title = " ".join(text[index + 1 : end - 1].split())
        return title, end


class MarkerInserter:
    """Strip non-narratable markup and inject section boundary markers."""

    def __init__(self) -> None:
        """Initialize the fixed rule sequence."""

        self._references = RemoveReferences()
        self._environments = RemoveBlockEnvironments()
        self._headings = RewriteHeadings()
        self.rules: list[MarkupRule] = [
            StripReservedCharacters(),
            StripComments(),
            self._references,
            self._environments,
            self._headings,
        ]

    def insert_with_report(self, text: str) -> InsertionReport:
        """Apply all rules in order and return the text with diagnostics."""

        current = text
        for rule in self.rules:
            current = rule.apply(current)
        return InsertionReport(
            text=current,
            division_titles=self._headings.last_division_titles,
            removed_environments=self._environments.last_removed_count,
            removed_references=self._references.last_removed_count,
        )

    def insert(self, text: str) -> str:
        """Apply all rules in order."""

        return self.insert_with_report(text).text
