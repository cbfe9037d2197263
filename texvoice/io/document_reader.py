"""Source document loading.

Responsibilities:
- Read one LaTeX document exactly once.
- Fail fast with a read-stage error before any transformation runs.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import MissingInputError
from ..models.datatypes import SourceDocument


class DocumentReader:
    """Load LaTeX source text from disk."""

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the reader with the source text encoding."""

        self.encoding = encoding

    def read(self, path: Path | None) -> SourceDocument:
        """Return the document at `path` or raise `MissingInputError`."""

        if path is None:
            raise MissingInputError(
                "No input document specified.",
                hint="Pass `<input.tex>` or set `input_tex` in the config file.",
            )
        if not path.is_file():
            raise MissingInputError(
                f"Input document not found: `{path}`.",
                hint="Verify the path points to an existing `.tex` file.",
            )
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise MissingInputError(
                f"Input document `{path}` is not readable: {exc}",
                hint=f"Check file permissions and that the file is {self.encoding} encoded.",
            ) from exc
        return SourceDocument(path=path, text=text)
