"""Domain exceptions for CLI diagnostics and tool launching."""

from __future__ import annotations


class LocatorStageError(RuntimeError):
    """Raised when a specific command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class LaunchError(RuntimeError):
    """Raised when an interactive command line cannot be started."""
