"""Runtime configuration and run-identity helpers for texvoice pipeline.

Responsibilities:
- Validate pipeline configuration before execution.
- Compute deterministic configuration hashes and run identifiers.
- Resolve the run output directory into artifact storage.
"""

from __future__ import annotations

from datetime import datetime
from hashlib import sha256
import json

from ..config import TexvoiceConfig
from ..errors import PipelineStageError
from ..io.storage import ArtifactStore


class PipelineRuntimeMixin:
    """Provide runtime/config helper methods for pipeline orchestration."""

    def _prepare_run(
        self, config: TexvoiceConfig, now: datetime | None = None
    ) -> tuple[str, str, ArtifactStore]:
        """Create deterministic run identifiers and artifact storage for a config."""

        self._validate_config(config)
        config_hash = self._config_hash(config)
        run_id = f"run-{config_hash[:12]}"
        store = ArtifactStore(config.resolved_output_dir(now))
        return run_id, config_hash, store

    def _validate_config(self, config: TexvoiceConfig) -> None:
        """Validate top-level configuration and map failures to stage-aware error."""

        try:
            config.validate()
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint="Update the config file or command options and rerun the command.",
            ) from exc

    def _config_hash(self, config: TexvoiceConfig) -> str:
        """Compute deterministic hash for run-defining configuration fields."""

        payload = {
            "input_tex": str(config.input_tex),
            "speed": config.speed,
            "bitrate": config.bitrate,
            "voice": config.voice,
            "section_prefix": config.section_prefix,
            "extra_abbreviations": sorted(config.extra_abbreviations),
            "case_sensitive_abbreviations": config.case_sensitive_abbreviations,
            "extra": dict(config.extra),
        }
        canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return sha256(canonical.encode("utf-8")).hexdigest()
