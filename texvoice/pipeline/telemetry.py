"""Stage telemetry helper methods for the texvoice pipeline.

Responsibilities:
- Provide stage index/total metadata for progress reporting.
- Emit stage start/complete/warning/failure events.
- Wrap stage actions so every failure names the stage it happened in.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from ..errors import PipelineStageError
from ..models.datatypes import MarkerStreamWarning
from ..telemetry.logger import RunLogger

_StageResult = TypeVar("_StageResult")


class PipelineTelemetryMixin:
    """Provide stage-telemetry helper methods."""

    _PHASE_SEQUENCE = (
        "read",
        "markers",
        "convert",
        "format",
        "split",
        "write",
        "synthesize",
        "cleanup",
        "manifest",
    )

    _run_logger: RunLogger | None
    _stage_progress_callback: Callable[[str, int, int], None] | None

    def _stage_position(self, stage_name: str) -> tuple[int, int] | None:
        """Return 1-based stage index and total stage count for known stages."""

        try:
            index = self._PHASE_SEQUENCE.index(stage_name) + 1
        except ValueError:
            return None
        return index, len(self._PHASE_SEQUENCE)

    def _on_stage_start(self, stage_name: str) -> None:
        """Emit start events to stage progress callback and structured logger."""

        stage_position = self._stage_position(stage_name)
        if stage_position and self._stage_progress_callback is not None:
            self._stage_progress_callback(stage_name, stage_position[0], stage_position[1])
        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage_name)

    def _on_stage_complete(self, stage_name: str) -> None:
        """Emit stage-complete event to the structured logger."""

        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage_name)

    def _on_stage_warning(self, stage_name: str, warning: MarkerStreamWarning) -> None:
        """Emit one recoverable marker-stream anomaly."""

        if self._run_logger is None:
            return
        context: dict[str, object] = {}
        if warning.section_index is not None:
            context["section"] = warning.section_index
        if warning.line_number is not None:
            context["line"] = warning.line_number
        self._run_logger.log_stage_warning(stage_name, warning.reason, **context)

    def _on_stage_failure(self, stage_name: str, exc: Exception) -> None:
        """Emit stage-failure event with sanitized exception metadata."""

        if self._run_logger is not None:
            self._run_logger.log_stage_failure(stage_name, type(exc).__name__)

    def _run_stage(
        self,
        stage_name: str,
        action: Callable[[], _StageResult],
    ) -> _StageResult:
        """Run one named stage; unexpected errors become stage errors."""

        self._on_stage_start(stage_name)
        try:
            result = action()
        except PipelineStageError as exc:
            self._on_stage_failure(exc.stage, exc)
            raise
        except Exception as exc:
            self._on_stage_failure(stage_name, exc)
            raise PipelineStageError(
                stage=stage_name,
                detail=f"Unexpected {type(exc).__name__}: {exc}",
            ) from exc
        self._on_stage_complete(stage_name)
        return result
