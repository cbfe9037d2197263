"""Artifact storage abstraction.

Responsibilities:
- Provide deterministic filesystem storage for text and JSON run artifacts.
- Remove intermediate artifacts during cleanup.
"""

from __future__ import annotations

import json
from pathlib import Path


class ArtifactStore:
    """Filesystem-backed store rooted at one run output directory."""

    def __init__(self, root: Path) -> None:
        """Initialize the store with a root output directory."""

        self.root = root

    def path_for(self, relative_path: Path) -> Path:
        """Return the absolute location of a relative artifact path."""

        return self.root / relative_path

    def save_text(self, relative_path: Path, content: str) -> Path:
        """Save text content and return final path."""

        path = self.path_for(relative_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def save_json(self, relative_path: Path, payload: dict[str, object]) -> Path:
        """Save JSON-serializable payload and return final path."""

        path = self.path_for(relative_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        return path

    def remove(self, relative_path: Path) -> bool:
        """Delete one artifact and return whether it existed."""

        path = self.path_for(relative_path)
        if not path.exists():
            return False
        path.unlink()
        return True
