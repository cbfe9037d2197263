"""Manifest-writing helpers for the texvoice pipeline.

Responsibilities:
- Serialize the typed `RunManifest` record to a JSON payload.
- Persist manifest payload to a deterministic artifact path.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from ..io.storage import ArtifactStore
from ..models.datatypes import RunManifest

MANIFEST_PATH = Path("run_manifest.json")


def manifest_payload(manifest: RunManifest) -> dict[str, object]:
    """Build a JSON-serializable manifest payload with string paths."""

    return {
        "run_id": manifest.run_id,
        "source_tex": str(manifest.source_tex),
        "output_dir": str(manifest.output_dir),
        "sections": [
            {
                "index": section.index,
                "title": section.title,
                "path": str(section.path),
                "line_count": section.line_count,
            }
            for section in manifest.sections
        ],
        "discarded_sections": list(manifest.discarded_sections),
        "audio": [
            {
                "index": item.index,
                "path": str(item.path),
                "source_text_path": str(item.source_text_path),
                "bitrate": item.bitrate,
                "speed": item.speed,
            }
            for item in manifest.audio
        ],
        "warnings": list(manifest.warnings),
        "extra": dict(manifest.extra),
    }


class PipelineManifestMixin:
    """Provide run-manifest persistence helpers."""

    def _write_manifest(self, manifest: RunManifest, store: ArtifactStore) -> RunManifest:
        """Persist `manifest` and return it with its own path recorded."""

        manifest_path = store.save_json(MANIFEST_PATH, manifest_payload(manifest))
        return replace(manifest, extra={**manifest.extra, "manifest_path": str(manifest_path)})
