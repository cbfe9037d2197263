"""Unit tests for markup stripping and boundary marker insertion."""

from __future__ import annotations

from texvoice.text.markers import (
    BOUNDARY_MARKER,
    MarkerInserter,
    RemoveBlockEnvironments,
    StripComments,
    header_line,
    read_group,
)


def test_top_level_division_gets_marker_followed_by_header_line() -> None:
    """A `\\section` heading should become a marker line followed by its header line."""

    report = MarkerInserter().insert_with_report("Preface.\n\\section{Introduction}\nHello there.\n")

    marker_at = report.text.index(BOUNDARY_MARKER)
    header_at = report.text.index(header_line(1, "Introduction"))
    assert marker_at < header_at
    assert report.text[marker_at + len(BOUNDARY_MARKER) : header_at].strip() == ""
    assert "\\section" not in report.text
    assert report.division_titles == ("Introduction",)


def test_lower_level_headings_get_distinct_delimiters_without_marker() -> None:
    """Subsections should be rewritten to level-specific header lines only."""

    text = MarkerInserter().insert("\\subsection*{Details}\nA.\n\\subsubsection{Fine print}\nB.\n")

    assert BOUNDARY_MARKER not in text
    assert header_line(2, "Details") in text
    assert header_line(3, "Fine print") in text
    assert header_line(1, "Details") not in text


def test_heading_title_uses_long_form_and_collapses_whitespace() -> None:
    """Optional short titles are skipped and title whitespace is collapsed."""

    report = MarkerInserter().insert_with_report("\\section[Short]{Long\n   Title}\nBody.\n")

    assert report.division_titles == ("Long Title",)
    assert header_line(1, "Long Title") in report.text


def test_citations_references_and_labels_are_removed() -> None:
    """Reference commands and their arguments should disappear from the output."""

    report = MarkerInserter().insert_with_report(
        "As shown \\cite{knuth84} in Figure~\\ref{fig:a}.\\label{sec:intro} "
        "See \\citep[p.~4][see]{lamport} too.\n"
    )

    assert "knuth84" not in report.text
    assert "fig:a" not in report.text
    assert "sec:intro" not in report.text
    assert "lamport" not in report.text
    assert "\\cite" not in report.text
    assert report.text.startswith("As shown  in Figure~.")
    assert report.removed_references == 4


def test_block_environments_are_removed_including_nested_same_name_blocks() -> None:
    """Removal must span to the matching `\\end`, not the first one found."""

    source = (
        "Before.\n"
        "\\begin{figure}outer\\begin{figure}inner\\end{figure}tail\\end{figure}\n"
        "\\begin{equation}x = 1\\end{equation}\n"
        "After.\n"
    )

    report = MarkerInserter().insert_with_report(source)

    assert "outer" not in report.text
    assert "inner" not in report.text
    assert "tail" not in report.text
    assert "x = 1" not in report.text
    assert "Before." in report.text
    assert "After." in report.text
    assert report.removed_environments == 2


def test_unclosed_environment_is_left_untouched() -> None:
    """An environment without a matching end should not swallow the rest of the text."""

    source = "\\begin{table} never closed\nStill narrated.\n"

    assert RemoveBlockEnvironments().apply(source) == source


def test_comments_are_removed_but_escaped_percent_signs_stay() -> None:
    """Line comments go away while `\\%` literals are kept."""

    assert StripComments().apply("Growth of 50\\% % internal note\nnext line\n") == (
        "Growth of 50\\% next line\n"
    )


def test_comment_ending_a_paragraph_keeps_the_paragraph_break() -> None:
    """A trailing comment must not swallow the blank line after it."""

    text = "First paragraph without period % note\n\nsecond paragraph.\n"

    assert StripComments().apply(text) == (
        "First paragraph without period \n\nsecond paragraph.\n"
    )


def test_comment_after_a_forced_line_break_is_removed() -> None:
    """`\\\\%` is a line break followed by a real comment."""

    report = MarkerInserter().insert_with_report("Line one\\\\% \\section{Hidden}\nnext\n")

    assert BOUNDARY_MARKER not in report.text
    assert report.division_titles == ()
    assert report.text == "Line one\\\\next\n"


def test_reserved_characters_in_source_cannot_forge_a_marker() -> None:
    """Document text containing the marker token must not produce a boundary."""

    report = MarkerInserter().insert_with_report(f"Forged {BOUNDARY_MARKER} token.\n")

    assert BOUNDARY_MARKER not in report.text
    assert report.division_titles == ()


def test_document_without_divisions_has_no_markers() -> None:
    """A document with no top-level headings yields no marker at all."""

    report = MarkerInserter().insert_with_report("Just a paragraph.\n")

    assert BOUNDARY_MARKER not in report.text
    assert report.text == "Just a paragraph.\n"


def test_read_group_skips_escaped_braces_and_reports_unclosed_groups() -> None:
    """Balanced group reader should ignore `\\{` and return `None` when unbalanced."""

    text = "{a \\} {b}} rest"

    assert read_group(text, 0) == len("{a \\} {b}}")
    assert read_group("{open", 0) is None
    assert read_group("x{y}", 0) is None
