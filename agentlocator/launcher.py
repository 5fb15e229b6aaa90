"""Interactive launch of a discovered tool.

Responsibilities:
- Build a shell-safe command line that changes into the working directory
  and starts the discovered executable.
- Run the command line interactively and surface start failures through
  the notification sink.

The launched tool's lifecycle and output are left entirely to the user's
terminal; nothing here parses or supervises it.
"""

from __future__ import annotations

import os
from pathlib import Path
import subprocess
from typing import Mapping, Protocol, Sequence

from .errors import LaunchError
from .notifications import Notifier, Severity
from .paths import shell_quote

LAUNCH_FAILURE_PREFIX = "Failed to start: "


class InteractiveRunner(Protocol):
    """Protocol for running one command line with the user's terminal attached."""

    def run_interactive(self, command_line: str) -> int:
        """Run the command line and return its exit code.

        Raises:
            LaunchError: If the command line cannot be started.
        """


def build_launch_command(
    agent_path: str,
    work_dir: Path | str | None = None,
    args: Sequence[str] = (),
    windows: bool = False,
) -> str:
    """Return `cd <dir> && <agent> <args...>` with every token quoted.

    POSIX lines use single-quote shell quoting; `windows=True` produces a
    `cmd.exe` line with `cd /d` and MSVC-style argument quoting.
    """

    if windows:
        invocation = subprocess.list2cmdline([agent_path, *args])
        if work_dir is None:
            return invocation
        return f"cd /d {subprocess.list2cmdline([str(work_dir)])} && {invocation}"

    invocation = " ".join(shell_quote(token) for token in (agent_path, *args))
    if work_dir is None:
        return invocation
    return f"cd {shell_quote(str(work_dir))} && {invocation}"


class ShellInteractiveRunner:
    """Run command lines through the user's shell with inherited stdio."""

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        windows: bool | None = None,
    ) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env
        self._windows = os.name == "nt" if windows is None else windows

    @property
    def windows(self) -> bool:
        return self._windows

    def shell_command(self, command_line: str) -> list[str] | str:
        """Return what `subprocess.run` needs to run `command_line` in the user's shell.

        On Windows this is a single string: `command_line` is already quoted
        for `cmd.exe`, and another `list2cmdline` pass would turn its quotes
        into `\\"`, which `cmd.exe` does not understand. `/s` makes `cmd.exe`
        strip exactly the outer pair of quotes added here.
        """

        if self._windows:
            comspec = subprocess.list2cmdline([self._env.get("COMSPEC") or "cmd.exe"])
            return f'{comspec} /s /c "{command_line}"'
        return [self._env.get("SHELL") or "/bin/sh", "-c", command_line]

    def run_interactive(self, command_line: str) -> int:
        try:
            completed = subprocess.run(self.shell_command(command_line), check=False)
        except OSError as exc:
            raise LaunchError(str(exc)) from exc
        return completed.returncode


def execute(runner: InteractiveRunner, notifier: Notifier, command_line: str) -> int | None:
    """Run a command line; on a start failure, notify the user and return `None`."""

    try:
        return runner.run_interactive(command_line)
    except LaunchError as exc:
        notifier.notify(f"{LAUNCH_FAILURE_PREFIX}{exc}", Severity.ERROR)
        return None
