"""Text normalization pipeline components.

This package provides the deterministic marker insertion, narration
formatting, and section splitting stages that surround plain-text conversion.
"""

from .abbreviations import DEFAULT_ABBREVIATIONS, AbbreviationSet
from .formatter import NarrationFormatter
from .markers import BOUNDARY_MARKER, HEADER_DELIMITERS, MarkerInserter
from .splitter import SectionSplitter

__all__ = [
    "AbbreviationSet",
    "BOUNDARY_MARKER",
    "DEFAULT_ABBREVIATIONS",
    "HEADER_DELIMITERS",
    "MarkerInserter",
    "NarrationFormatter",
    "SectionSplitter",
]
