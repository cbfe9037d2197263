"""Top-level package for texvoice.

This package turns a LaTeX document into narration-ready plain text split
into one file per top-level division, with optional speech synthesis. The
main orchestration entry point is `TexvoicePipeline`.
"""

from .pipeline import TexvoicePipeline

__all__ = ["TexvoicePipeline", "__version__"]

__version__ = "0.1.0"
