"""Unit tests for boundary-marker section splitting."""

from __future__ import annotations

from texvoice.models.datatypes import MarkerStreamWarning
from texvoice.text.markers import BOUNDARY_MARKER
from texvoice.text.splitter import SectionSplitter

M = BOUNDARY_MARKER


def test_n_markers_yield_n_plus_one_buffers_with_preamble_first() -> None:
    """Content before the first marker is kept as buffer 0."""

    stream = f"Front matter.\n\n{M}\n\nIntro\n\nFirst.\nSecond.\n\n{M}\n\nMethods\n\nThird.\n"

    buffers = SectionSplitter().split(stream)

    assert [buffer.index for buffer in buffers] == [0, 1, 2]
    assert buffers[0].lines == ("Front matter.",)
    assert buffers[0].title is None
    assert buffers[1].title == "Intro"
    assert buffers[1].lines == ("Intro", "", "First.", "Second.")
    assert buffers[2].title == "Methods"
    assert buffers[2].text == "Methods\n\nThird.\n"


def test_markers_never_appear_in_buffers_and_all_other_lines_survive() -> None:
    """Splitting keeps every non-marker line in order and drops only markers."""

    stream = f"a\n{M}\nT1\nb\n{M}\nT2\nc\n\nd\n"

    buffers = SectionSplitter().split(stream)
    kept = [line for buffer in buffers for line in buffer.lines if line.strip()]
    expected = [line for line in stream.splitlines() if line.strip() and line != M]

    assert kept == expected
    assert all(M not in line for buffer in buffers for line in buffer.lines)


def test_stream_without_markers_is_a_single_buffer() -> None:
    """A document with no divisions produces exactly one buffer."""

    buffers = SectionSplitter().split("Only text.\nMore text.\n")

    assert len(buffers) == 1
    assert buffers[0].lines == ("Only text.", "More text.")


def test_empty_buffers_are_emitted_not_filtered() -> None:
    """A leading marker and back-to-back markers produce empty buffers."""

    report = SectionSplitter().split_with_report(f"{M}\n\n{M}\n\nTitle\n\nBody.\n")

    assert len(report.buffers) == 3
    assert report.buffers[0].is_empty
    assert report.buffers[0].text == ""
    assert report.buffers[1].is_empty
    assert report.buffers[2].title == "Title"
    assert MarkerStreamWarning(reason="missing_title", section_index=1) in report.warnings


def test_marker_sharing_a_line_with_text_is_split_and_reported() -> None:
    """Inline markers still split the stream but emit a warning."""

    report = SectionSplitter().split_with_report(f"before {M} after\nrest\n")

    assert report.buffers[0].lines == ("before",)
    assert report.buffers[1].lines == ("after", "rest")
    assert report.warnings[0].reason == "marker_not_standalone"
    assert report.warnings[0].line_number == 1


def test_expected_titles_flag_only_a_division_count_mismatch() -> None:
    """Titles captured at insertion time are checked by count."""

    stream = f"{M}\nIntro\n{M}\nWrong title\n"
    splitter = SectionSplitter()

    matching = splitter.split_with_report(stream, expected_titles=("Intro", "Other"))
    mismatched = splitter.split_with_report(stream, expected_titles=("Intro",))

    assert matching.warnings == ()
    assert [warning.reason for warning in mismatched.warnings] == ["marker_count_mismatch"]
    assert mismatched.warnings[0].describe() == "marker_count_mismatch"


def test_titles_rewritten_by_conversion_do_not_warn() -> None:
    """Escapes, ties and math rendered differently by pandoc are not anomalies."""

    stream = f"{M}\n\nResults & Related Work\n\nBody.\n\n{M}\n\nThe x² law\n\nMore.\n"

    report = SectionSplitter().split_with_report(
        stream,
        expected_titles=("Results \\& Related~Work", "The $x^2$ law"),
    )

    assert report.warnings == ()
    assert report.buffers[1].title == "Results & Related Work"
