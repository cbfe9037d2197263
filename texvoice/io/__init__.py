"""Input/output stage components for texvoice.

This package contains document loading, plain-text conversion, and artifact
storage interfaces used by the pipeline.
"""

from .document_reader import DocumentReader
from .pandoc_converter import PandocConverter, PlainTextConversionError
from .storage import ArtifactStore

__all__ = ["ArtifactStore", "DocumentReader", "PandocConverter", "PlainTextConversionError"]
