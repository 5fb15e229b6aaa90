"""Unit tests for override handling, platform dispatch, and full resolution."""

from __future__ import annotations

from io import StringIO
import os
from pathlib import Path
from typing import Callable

import pytest

from agentlocator import process, resolver
from agentlocator.process import CommandOutput
from agentlocator.resolver import (
    HostPlatform,
    ResolutionRequest,
    ResolutionResult,
    detect_platform,
    resolve,
    resolve_agent_path,
)
from agentlocator.strategies import LoginShellLookup, PowerShellLookup, WhereLookup
from agentlocator.telemetry.logger import DiscoveryLogger
from tests.fakes import FakeRunner


@pytest.mark.parametrize(
    ("system_name", "expected"),
    [
        ("Windows", HostPlatform.WINDOWS),
        ("windows_nt", HostPlatform.WINDOWS),
        ("Darwin", HostPlatform.POSIX),
        ("Linux", HostPlatform.POSIX),
        ("FreeBSD", HostPlatform.POSIX),
        ("CYGWIN_NT-10.0", HostPlatform.POSIX),
        ("", HostPlatform.POSIX),
    ],
)
def test_detect_platform_defaults_unknown_systems_to_posix(
    system_name: str, expected: HostPlatform
) -> None:
    assert detect_platform(system_name) is expected


@pytest.mark.parametrize("platform", [HostPlatform.WINDOWS, HostPlatform.POSIX])
def test_valid_override_wins_on_every_platform_without_spawning(
    make_file: Callable[..., Path], platform: HostPlatform
) -> None:
    """An executable override short-circuits discovery regardless of platform."""

    tool = make_file("custom/cursor-agent")
    runner = FakeRunner()

    result = resolve_agent_path(
        ResolutionRequest(),
        env={"CURSOR_AGENT": f"  {tool}  "},
        runner=runner,
        platform=platform,
    )

    assert result == ResolutionResult(path=str(tool), source="override")
    assert runner.calls == []


def test_override_expands_leading_tilde(
    monkeypatch: pytest.MonkeyPatch, make_file: Callable[..., Path], tmp_path: Path
) -> None:
    tool = make_file("home/u/.local/bin/cursor-agent")
    monkeypatch.setattr(Path, "home", lambda: tmp_path / "home" / "u")

    result = resolve_agent_path(
        ResolutionRequest(),
        env={"CURSOR_AGENT": f"~{os.sep}.local{os.sep}bin{os.sep}cursor-agent"},
        runner=FakeRunner(),
        platform=HostPlatform.POSIX,
    )

    assert result.path == str(tool)
    assert result.source == "override"


@pytest.mark.parametrize("override_kind", ["non-executable", "missing", "directory", "blank"])
def test_invalid_override_falls_through_to_platform_strategies(
    make_file: Callable[..., Path], tmp_path: Path, override_kind: str
) -> None:
    """Unusable overrides are ignored and never returned."""

    overrides = {
        "non-executable": str(make_file("custom/cursor-agent", mode=0o644)),
        "missing": str(tmp_path / "nowhere" / "cursor-agent"),
        "directory": str(tmp_path),
        "blank": "   ",
    }
    shell = make_file("shells/bash")
    tool = make_file("bin/cursor-agent")
    request = ResolutionRequest(work_dir=tmp_path, posix_shells=(str(shell),))
    runner = FakeRunner({LoginShellLookup(str(shell), "cursor-agent").command(): str(tool)})

    result = resolve_agent_path(
        request,
        env={"CURSOR_AGENT": overrides[override_kind]},
        runner=runner,
        platform=HostPlatform.POSIX,
    )

    assert result.path == str(tool)
    assert result.source == f"login-shell:{shell}"
    assert result.path != overrides[override_kind]


def test_override_step_is_skipped_when_disabled(
    make_file: Callable[..., Path], tmp_path: Path
) -> None:
    tool = make_file("custom/cursor-agent")

    result = resolve_agent_path(
        ResolutionRequest(override_env=None, posix_shells=(str(tmp_path / "zsh"),)),
        env={"CURSOR_AGENT": str(tool)},
        runner=FakeRunner(),
        platform=HostPlatform.POSIX,
    )

    assert result.found is False


def test_posix_skips_missing_zsh_and_uses_bash_result(
    make_file: Callable[..., Path], tmp_path: Path
) -> None:
    """Priority order holds: an absent first shell is skipped, the next one resolves."""

    zsh = tmp_path / "shells" / "zsh"
    bash = make_file("shells/bash")
    sh = make_file("shells/sh")
    tool = make_file("bash-path/cursor-agent")
    other = make_file("sh-path/cursor-agent")
    runner = FakeRunner(
        {
            LoginShellLookup(str(bash), "cursor-agent").command(): str(tool),
            LoginShellLookup(str(sh), "cursor-agent").command(): str(other),
        }
    )
    request = ResolutionRequest(work_dir=tmp_path, posix_shells=(str(zsh), str(bash), str(sh)))

    result = resolve_agent_path(request, env={}, runner=runner, platform=HostPlatform.POSIX)

    assert result.path == str(tool)
    assert result.source == f"login-shell:{bash}"
    assert runner.commands == [LoginShellLookup(str(bash), "cursor-agent").command()]
    assert [attempt.failure for attempt in result.attempts] == ["shell not installed", None]


def test_macos_login_shell_scenario(make_file: Callable[..., Path], tmp_path: Path) -> None:
    """zsh login-shell `command -v` output pointing at ~/.local/bin is accepted."""

    zsh = make_file("bin/zsh")
    tool = make_file("home/u/.local/bin/cursor-agent")
    work_dir = tmp_path / "home" / "u" / "project"
    runner = FakeRunner({LoginShellLookup(str(zsh), "cursor-agent").command(): f"{tool}\n"})

    result = resolve_agent_path(
        ResolutionRequest(work_dir=work_dir, posix_shells=(str(zsh),)),
        env={},
        runner=runner,
        platform=detect_platform("Darwin"),
    )

    assert result.path == str(tool)
    assert runner.calls[0][1] == work_dir


def test_windows_where_scenario_returns_first_line(
    make_file: Callable[..., Path], tmp_path: Path
) -> None:
    """`where.exe` printing two matches yields the first one."""

    first = make_file("npm/cursor-agent.cmd")
    second = make_file("other/cursor-agent.exe")
    work_dir = tmp_path / "proj"
    runner = FakeRunner({WhereLookup("cursor-agent").command(): f"{first}\r\n{second}\r\n"})

    result = resolve_agent_path(
        ResolutionRequest(work_dir=work_dir),
        env={},
        runner=runner,
        platform=detect_platform("Windows"),
    )

    assert result.path == str(first)
    assert result.source == "where:cursor-agent"
    assert runner.calls == [(("where.exe", "cursor-agent"), work_dir, 10.0)]


def test_windows_falls_back_to_powershell_then_extensions(
    make_file: Callable[..., Path], tmp_path: Path
) -> None:
    """Where, Get-Command, then where per extension, in that exact order."""

    tool = make_file("bin/cursor-agent.cmd")
    runner = FakeRunner(
        {
            WhereLookup("cursor-agent").command(): CommandOutput.failed("spawn failed: OSError"),
            PowerShellLookup("cursor-agent").command(): "",
            WhereLookup("cursor-agent.exe").command(): "INFO: Could not find files",
            WhereLookup("cursor-agent.cmd").command(): str(tool),
        }
    )

    result = resolve_agent_path(
        ResolutionRequest(work_dir=tmp_path),
        env={},
        runner=runner,
        platform=HostPlatform.WINDOWS,
    )

    assert result.path == str(tool)
    assert runner.commands == [
        ("where.exe", "cursor-agent"),
        PowerShellLookup("cursor-agent").command(),
        ("where.exe", "cursor-agent.exe"),
        ("where.exe", "cursor-agent.cmd"),
    ]


@pytest.mark.parametrize("platform", [HostPlatform.WINDOWS, HostPlatform.POSIX])
def test_total_failure_returns_absent_without_raising(
    tmp_path: Path, platform: HostPlatform
) -> None:
    request = ResolutionRequest(
        work_dir=tmp_path,
        posix_shells=(str(tmp_path / "zsh"), str(tmp_path / "bash")),
    )

    result = resolve_agent_path(request, env={}, runner=FakeRunner(), platform=platform)

    assert result.found is False
    assert result.path is None
    assert result.source is None
    assert result.attempts


def test_timeout_is_passed_to_every_spawn(make_file: Callable[..., Path], tmp_path: Path) -> None:
    shell = make_file("shells/sh")
    runner = FakeRunner()

    resolve_agent_path(
        ResolutionRequest(posix_shells=(str(shell),), timeout_seconds=2.5),
        env={},
        runner=runner,
        platform=HostPlatform.POSIX,
    )

    assert [timeout for _, _, timeout in runner.calls] == [2.5]


def test_unexpected_spawn_error_counts_as_strategy_failure(
    monkeypatch: pytest.MonkeyPatch, make_file: Callable[..., Path]
) -> None:
    """Errors raised while spawning never escape discovery."""

    shell = make_file("shells/sh")

    def _overflowing_run(*_: object, **__: object) -> None:
        raise OverflowError("cannot convert float infinity to integer")

    monkeypatch.setattr(process.subprocess, "run", _overflowing_run)

    result = resolve_agent_path(
        ResolutionRequest(posix_shells=(str(shell),)),
        env={},
        platform=HostPlatform.POSIX,
    )

    assert result.found is False
    assert [outcome.failure for outcome in result.attempts] == ["spawn failed: OverflowError"]


def test_resolution_emits_discovery_log_lines(
    make_file: Callable[..., Path], tmp_path: Path
) -> None:
    """A configured logger should see the rejected override, misses, and the hit."""

    shell = make_file("shells/sh")
    tool = make_file("bin/cursor-agent")
    sink = StringIO()
    runner = FakeRunner({LoginShellLookup(str(shell), "cursor-agent").command(): str(tool)})

    resolve_agent_path(
        ResolutionRequest(posix_shells=(str(tmp_path / "zsh"), str(shell))),
        env={"CURSOR_AGENT": str(tmp_path / "missing")},
        runner=runner,
        platform=HostPlatform.POSIX,
        logger=DiscoveryLogger(sink=sink),
    )

    lines = sink.getvalue().splitlines()
    assert lines[0] == (
        "[discovery] level=DEBUG step=override event=override-rejected variable=CURSOR_AGENT"
    )
    assert lines[1] == "[discovery] level=DEBUG step=dispatch event=platform platform=posix strategies=2"
    assert "event=miss reason=shell_not_installed" in lines[2]
    assert lines[3].endswith(f"event=hit path={tool}")


def test_resolve_wrapper_returns_plain_path(
    monkeypatch: pytest.MonkeyPatch, make_file: Callable[..., Path], tmp_path: Path
) -> None:
    tool = make_file("custom/cursor-agent")
    monkeypatch.setenv("CURSOR_AGENT", str(tool))

    assert resolve(tmp_path, "cursor-agent") == str(tool)


def test_resolve_wrapper_returns_none_when_nothing_resolves(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(resolver, "detect_platform", lambda: HostPlatform.POSIX)
    monkeypatch.setattr(
        resolver, "SubprocessRunner", lambda: FakeRunner({})
    )

    assert resolve(str(tmp_path), "definitely-not-installed-tool") is None
