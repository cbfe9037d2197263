"""Domain exceptions for pipeline and CLI diagnostics."""

from __future__ import annotations


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class MissingInputError(PipelineStageError):
    """Raised when the source document is absent or unreadable."""

    def __init__(self, detail: str, hint: str | None = None) -> None:
        """Initialize a read-stage error for a missing or unreadable document."""

        super().__init__(stage="read", detail=detail, hint=hint)
