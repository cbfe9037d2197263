"""Shared typed data models for texvoice.

This package contains dataclasses used across pipeline modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    AudioArtifact,
    InsertionReport,
    MarkerStreamWarning,
    RunManifest,
    SectionArtifact,
    SectionBuffer,
    SourceDocument,
    SplitReport,
)

__all__ = [
    "AudioArtifact",
    "InsertionReport",
    "MarkerStreamWarning",
    "RunManifest",
    "SectionArtifact",
    "SectionBuffer",
    "SourceDocument",
    "SplitReport",
]
