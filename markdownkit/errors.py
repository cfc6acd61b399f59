"""Domain exceptions for rule registration, NLP cleanup, and CLI diagnostics."""

from __future__ import annotations

from pathlib import Path


class ValidationError(ValueError):
    """Raised when an externally supplied rule set has an invalid shape."""


class NlpStageError(RuntimeError):
    """Raised when natural-language cleanup of one line fails.

    The NLP pass catches this error at the line level and keeps the original
    line, so it never reaches callers of the orchestrator.
    """

    def __init__(self, *, line_number: int, line: str, detail: str) -> None:
        """Initialize a line-scoped NLP failure."""

        super().__init__(f"NLP cleanup failed on line {line_number}: {detail}")
        self.line_number = line_number
        self.line = line
        self.detail = detail


class PluginLoadError(RuntimeError):
    """Raised when a plugin module cannot be imported or exposes no rule set."""

    def __init__(self, *, path: Path, detail: str) -> None:
        """Initialize a plugin-scoped load failure."""

        super().__init__(f"Failed to load plugin `{path}`: {detail}")
        self.path = path
        self.detail = detail


class PipelineStageError(RuntimeError):
    """Raised when a specific command stage fails."""

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
