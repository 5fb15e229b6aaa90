"""Process-execution primitive for lookup strategies.

Responsibilities:
- Spawn a short-lived lookup command with a working directory and bounded wait.
- Capture combined stdout/stderr and decode it as UTF-8.
- Report every spawn, timeout, or decode problem as a typed failure value.

Key types:
- `CommandOutput`: decoded output text or a failure description.
- `ProcessRunner`: protocol implemented by real and fake runners.
- `SubprocessRunner`: `subprocess`-backed runner used outside tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import subprocess
from typing import Protocol, Sequence


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Outcome of one lookup command.

    Attributes:
        text: Trimmed, decoded combined output when the command ran.
        failure: Short failure description when the command could not run.
    """

    text: str | None = None
    failure: str | None = None

    @classmethod
    def ok(cls, text: str) -> CommandOutput:
        return cls(text=text.strip())

    @classmethod
    def failed(cls, failure: str) -> CommandOutput:
        return cls(failure=failure)


class ProcessRunner(Protocol):
    """Protocol for running one lookup command to completion."""

    def run(
        self,
        command: Sequence[str],
        cwd: Path | None,
        timeout_seconds: float | None,
    ) -> CommandOutput:
        """Run a command and return its decoded output or a failure value."""


class SubprocessRunner:
    """Run lookup commands with `subprocess.run`, never raising to the caller."""

    def run(
        self,
        command: Sequence[str],
        cwd: Path | None,
        timeout_seconds: float | None,
    ) -> CommandOutput:
        """Run a command with stdin closed and stderr merged into stdout."""

        try:
            completed = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd is not None else None,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return CommandOutput.failed(f"timed out after {timeout_seconds:g}s")
        except FileNotFoundError:
            return CommandOutput.failed(f"`{command[0]}` or working directory not found")
        except Exception as exc:
            return CommandOutput.failed(f"spawn failed: {type(exc).__name__}")

        try:
            decoded = completed.stdout.decode("utf-8")
        except UnicodeDecodeError:
            return CommandOutput.failed("output is not valid UTF-8")
        return CommandOutput.ok(decoded)
