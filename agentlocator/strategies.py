"""Ordered lookup strategies for locating an external executable.

Responsibilities:
- Model each lookup method as a small immutable strategy value.
- Build the platform-specific strategy sequences in priority order.
- Run a sequence strictly in order and stop at the first usable candidate.

Key types:
- `LookupOutcome`: typed result of one strategy attempt.
- `WhereLookup`: `where.exe <name>` first-line lookup (Windows).
- `PowerShellLookup`: `Get-Command` lookup that sees more than plain PATH (Windows).
- `LoginShellLookup`: `<shell> -lc "command -v <name> || true"` lookup (POSIX).
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Callable, Iterable, Protocol, Sequence

from .paths import is_executable_file, shell_quote
from .process import ProcessRunner


DEFAULT_POSIX_SHELLS: tuple[str, ...] = ("/bin/zsh", "/bin/bash", "/bin/sh")
DEFAULT_WINDOWS_EXTENSIONS: tuple[str, ...] = (".exe", ".cmd", ".bat")


@dataclass(frozen=True, slots=True)
class LookupOutcome:
    """Result of one strategy attempt.

    Attributes:
        strategy: Label of the strategy that produced this outcome.
        path: Accepted executable path, when the attempt succeeded.
        failure: Short reason why the attempt produced no usable candidate.
    """

    strategy: str
    path: str | None = None
    failure: str | None = None

    @property
    def found(self) -> bool:
        """Return whether this attempt produced an accepted path."""

        return self.path is not None


class LookupStrategy(Protocol):
    """Protocol for one candidate lookup method in the fallback chain."""

    @property
    def label(self) -> str:
        """Return a stable human-readable strategy label."""

    def lookup(
        self,
        work_dir: Path | None,
        runner: ProcessRunner,
        timeout_seconds: float | None,
    ) -> LookupOutcome:
        """Run the lookup and return an accepted path or a failure value."""


def accept_candidate(label: str, candidate: str | None) -> LookupOutcome:
    """Validate a candidate path printed by a lookup command."""

    if not candidate:
        return LookupOutcome(strategy=label, failure="no output")
    if not os.path.isabs(candidate):
        return LookupOutcome(strategy=label, failure="candidate is not an absolute path")
    if not is_executable_file(candidate):
        return LookupOutcome(strategy=label, failure="candidate is not an executable file")
    return LookupOutcome(strategy=label, path=candidate)


@dataclass(frozen=True, slots=True)
class WhereLookup:
    """Look a command up with the Windows `where.exe` utility."""

    name: str

    @property
    def label(self) -> str:
        return f"where:{self.name}"

    def command(self) -> tuple[str, ...]:
        return ("where.exe", self.name)

    def lookup(
        self,
        work_dir: Path | None,
        runner: ProcessRunner,
        timeout_seconds: float | None,
    ) -> LookupOutcome:
        """Accept only the first listed match; `where` prints one match per line."""

        output = runner.run(self.command(), work_dir, timeout_seconds)
        if output.text is None:
            return LookupOutcome(strategy=self.label, failure=output.failure or "no output")

        lines = output.text.splitlines()
        first_line = lines[0].strip() if lines else ""
        return accept_candidate(self.label, first_line)


@dataclass(frozen=True, slots=True)
class PowerShellLookup:
    """Look a command up with PowerShell `Get-Command`."""

    name: str

    @property
    def label(self) -> str:
        return f"powershell:{self.name}"

    def command(self) -> tuple[str, ...]:
        return (
            "powershell.exe",
            "-Command",
            f"Get-Command {self.name} -ErrorAction SilentlyContinue "
            "| Select-Object -ExpandProperty Source",
        )

    def lookup(
        self,
        work_dir: Path | None,
        runner: ProcessRunner,
        timeout_seconds: float | None,
    ) -> LookupOutcome:
        output = runner.run(self.command(), work_dir, timeout_seconds)
        if output.text is None:
            return LookupOutcome(strategy=self.label, failure=output.failure or "no output")
        return accept_candidate(self.label, output.text)


@dataclass(frozen=True, slots=True)
class LoginShellLookup:
    """Look a command up inside a login shell so profile PATH changes apply."""

    shell: str
    name: str

    @property
    def label(self) -> str:
        return f"login-shell:{self.shell}"

    def command(self) -> tuple[str, ...]:
        return (self.shell, "-lc", f"command -v {shell_quote(self.name)} || true")

    def lookup(
        self,
        work_dir: Path | None,
        runner: ProcessRunner,
        timeout_seconds: float | None,
    ) -> LookupOutcome:
        """Skip missing shells without spawning, otherwise accept the trimmed output."""

        if not os.path.exists(self.shell):
            return LookupOutcome(strategy=self.label, failure="shell not installed")

        output = runner.run(self.command(), work_dir, timeout_seconds)
        if output.text is None:
            return LookupOutcome(strategy=self.label, failure=output.failure or "no output")
        return accept_candidate(self.label, output.text)


def windows_strategies(
    tool_name: str,
    extensions: Sequence[str] = DEFAULT_WINDOWS_EXTENSIONS,
) -> tuple[LookupStrategy, ...]:
    """Return Windows strategies: `where`, `Get-Command`, then `where` per extension."""

    strategies: list[LookupStrategy] = [WhereLookup(tool_name), PowerShellLookup(tool_name)]
    strategies.extend(WhereLookup(f"{tool_name}{extension}") for extension in extensions)
    return tuple(strategies)


def posix_strategies(
    tool_name: str,
    shells: Sequence[str] = DEFAULT_POSIX_SHELLS,
) -> tuple[LookupStrategy, ...]:
    """Return one login-shell strategy per candidate shell, in priority order."""

    return tuple(LoginShellLookup(shell, tool_name) for shell in shells)


def first_success(
    strategies: Iterable[LookupStrategy],
    work_dir: Path | None,
    runner: ProcessRunner,
    timeout_seconds: float | None,
    on_attempt: Callable[[LookupOutcome], None] | None = None,
) -> tuple[LookupOutcome | None, tuple[LookupOutcome, ...]]:
    """Try strategies strictly in order and stop at the first accepted path.

    Returns:
        The winning outcome (or `None` when every strategy failed) and every
        attempted outcome in order.
    """

    attempts: list[LookupOutcome] = []
    for strategy in strategies:
        outcome = strategy.lookup(work_dir, runner, timeout_seconds)
        attempts.append(outcome)
        if on_attempt is not None:
            on_attempt(outcome)
        if outcome.found:
            return outcome, tuple(attempts)
    return None, tuple(attempts)
