"""Executable discovery for external command-line tools.

Responsibilities:
- Honor an explicit override environment variable before any lookup.
- Dispatch once on host platform identity (Windows or POSIX).
- Run the platform's ordered lookup strategies and report a path or absence.

Key types:
- `ResolutionRequest`: per-call discovery inputs, built fresh for each attempt.
- `ResolutionResult`: accepted executable path or explicit absence.
- `HostPlatform`: the two platform families with distinct strategy sets.

Key public functions:
- `resolve_agent_path`: full resolution returning a `ResolutionResult`.
- `resolve`: convenience wrapper returning a path string or `None`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import os
from pathlib import Path
import platform as _platform
from typing import Mapping

from .parsing import normalize_optional_string
from .paths import expand_home, is_executable_file
from .process import ProcessRunner, SubprocessRunner
from .strategies import (
    DEFAULT_POSIX_SHELLS,
    DEFAULT_WINDOWS_EXTENSIONS,
    LookupOutcome,
    LookupStrategy,
    first_success,
    posix_strategies,
    windows_strategies,
)
from .telemetry.logger import DiscoveryLogger


DEFAULT_TOOL_NAME = "cursor-agent"
DEFAULT_OVERRIDE_ENV = "CURSOR_AGENT"
DEFAULT_TIMEOUT_SECONDS = 10.0
OVERRIDE_SOURCE = "override"


class HostPlatform(str, Enum):
    """Platform families with distinct lookup strategy sets."""

    WINDOWS = "windows"
    POSIX = "posix"


def detect_platform(system_name: str | None = None) -> HostPlatform:
    """Map an OS name to a platform family; anything not Windows is POSIX."""

    name = system_name if system_name is not None else _platform.system()
    if name.strip().lower().startswith("windows"):
        return HostPlatform.WINDOWS
    return HostPlatform.POSIX


@dataclass(frozen=True, slots=True)
class ResolutionRequest:
    """Inputs for one discovery attempt.

    Attributes:
        work_dir: Working directory for spawned lookup commands.
        tool_name: Command name to locate.
        override_env: Environment variable holding an explicit tool path.
        timeout_seconds: Per-strategy wait bound; `None` waits indefinitely.
        posix_shells: Login shells tried in priority order on POSIX hosts.
        windows_extensions: Suffixes retried with `where.exe` on Windows hosts.
    """

    work_dir: Path | None = None
    tool_name: str = DEFAULT_TOOL_NAME
    override_env: str | None = DEFAULT_OVERRIDE_ENV
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS
    posix_shells: tuple[str, ...] = DEFAULT_POSIX_SHELLS
    windows_extensions: tuple[str, ...] = DEFAULT_WINDOWS_EXTENSIONS


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome of one discovery attempt.

    Attributes:
        path: Executable path accepted at check time, or `None` when absent.
        source: `"override"` or the label of the winning strategy.
        attempts: Every strategy outcome tried, in order.
    """

    path: str | None = None
    source: str | None = None
    attempts: tuple[LookupOutcome, ...] = ()

    @property
    def found(self) -> bool:
        """Return whether discovery produced a path."""

        return self.path is not None


def strategies_for(platform: HostPlatform, request: ResolutionRequest) -> tuple[LookupStrategy, ...]:
    """Return the ordered strategy set for a platform family."""

    if platform is HostPlatform.WINDOWS:
        return windows_strategies(request.tool_name, request.windows_extensions)
    return posix_strategies(request.tool_name, request.posix_shells)


def resolve_override(
    override_env: str | None,
    env: Mapping[str, str],
) -> str | None:
    """Return the home-expanded override path when it names an executable file."""

    if override_env is None:
        return None
    raw_value = normalize_optional_string(env.get(override_env))
    if raw_value is None:
        return None
    candidate = expand_home(raw_value)
    if candidate is None or not is_executable_file(candidate):
        return None
    return candidate


def resolve_agent_path(
    request: ResolutionRequest,
    *,
    env: Mapping[str, str] | None = None,
    runner: ProcessRunner | None = None,
    platform: HostPlatform | None = None,
    logger: DiscoveryLogger | None = None,
) -> ResolutionResult:
    """Locate the requested tool, trying the override first and then platform strategies.

    Failures inside strategies never propagate; exhausting every strategy
    yields a result with `path=None`.
    """

    env_map: Mapping[str, str] = os.environ if env is None else env
    active_logger = logger if logger is not None else DiscoveryLogger()

    if request.override_env is not None and normalize_optional_string(
        env_map.get(request.override_env)
    ) is not None:
        override_path = resolve_override(request.override_env, env_map)
        active_logger.log_override(request.override_env, accepted=override_path is not None)
        if override_path is not None:
            return ResolutionResult(path=override_path, source=OVERRIDE_SOURCE)

    host_platform = platform if platform is not None else detect_platform()
    strategies = strategies_for(host_platform, request)
    active_logger.log_platform(host_platform.value, len(strategies))

    winner, attempts = first_success(
        strategies,
        request.work_dir,
        runner if runner is not None else SubprocessRunner(),
        request.timeout_seconds,
        on_attempt=lambda outcome: active_logger.log_attempt(
            outcome.strategy, outcome.path, outcome.failure
        ),
    )
    if winner is None:
        active_logger.log_exhausted(request.tool_name)
        return ResolutionResult(attempts=attempts)
    return ResolutionResult(path=winner.path, source=winner.strategy, attempts=attempts)


def resolve(work_dir: Path | str | None, tool_name: str = DEFAULT_TOOL_NAME) -> str | None:
    """Return an executable path for `tool_name`, or `None` when it cannot be located."""

    request = ResolutionRequest(
        work_dir=Path(work_dir) if work_dir is not None else None,
        tool_name=tool_name,
    )
    return resolve_agent_path(request).path
