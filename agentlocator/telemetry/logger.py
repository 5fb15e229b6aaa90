"""Structured discovery logging utilities.

Responsibilities:
- Emit concise, deterministic step-level discovery logs through `loguru`.
- Keep the library silent until a caller installs a sink.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger

_PACKAGE_NAME = "agentlocator"


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/", "\\"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def format_discovery_line(level: str, step: str, event: str, **context: object) -> str:
    """Render one discovery log line without emitting it."""

    return f"[discovery] level={level} step={step} event={event}{_format_context(context)}"


class DiscoveryLogger:
    """Emit deterministic discovery events for resolver activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "DEBUG") -> None:
        """Initialize the logger, routing package logs to `sink` when one is given.

        Without a sink, events go to whatever loguru configuration the host
        application has, and stay muted while the package is disabled. Sinks
        installed by the host are left in place.
        """

        self._sink = sink
        self._handler_id: int | None = None
        if sink is not None:
            self._handler_id = _loguru_logger.add(
                sink,
                format="{message}",
                level=level,
                colorize=False,
                filter=_PACKAGE_NAME,
            )
            _loguru_logger.enable(_PACKAGE_NAME)

    def close(self) -> None:
        """Remove the sink installed by this logger, if any."""

        if self._handler_id is not None:
            _loguru_logger.remove(self._handler_id)
            self._handler_id = None

    @classmethod
    def to_stderr(cls, level: str = "DEBUG") -> DiscoveryLogger:
        return cls(sink=sys.stderr, level=level)

    @staticmethod
    def emit(level: str, step: str, event: str, **context: object) -> None:
        """Emit one structured discovery log line."""

        _loguru_logger.log(level, format_discovery_line(level, step, event, **context))

    def log_override(self, variable: str, accepted: bool) -> None:
        """Emit an override accept/reject event without the override value."""

        event = "override-accepted" if accepted else "override-rejected"
        self.emit("DEBUG", "override", event, variable=variable)

    def log_platform(self, platform_name: str, strategy_count: int) -> None:
        self.emit("DEBUG", "dispatch", "platform", platform=platform_name, strategies=strategy_count)

    def log_attempt(self, strategy: str, path: str | None, failure: str | None) -> None:
        """Emit a hit or miss event for one strategy attempt."""

        if path is not None:
            self.emit("INFO", strategy, "hit", path=path)
            return
        self.emit("DEBUG", strategy, "miss", reason=failure or "unknown")

    def log_exhausted(self, tool_name: str) -> None:
        self.emit("WARNING", "resolve", "exhausted", tool=tool_name)
