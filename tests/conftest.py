"""Shared pytest fixtures for the full agentlocator test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

from loguru import logger
import pytest

_ISOLATED_ENV_KEYS = (
    "CURSOR_AGENT",
    "AGENTLOCATOR_TOOL",
    "AGENTLOCATOR_OVERRIDE_ENV",
    "AGENTLOCATOR_TIMEOUT",
    "AGENTLOCATOR_SHELLS",
    "AGENTLOCATOR_WINDOWS_EXTENSIONS",
    "AGENTLOCATOR_WORK_DIR",
)


@pytest.fixture(autouse=True)
def _isolate_discovery_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host override and config variables from leaking into tests."""

    for key in _ISOLATED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Provide a factory creating a script file under `tmp_path` with a given mode."""

    def _make(relative_path: str, mode: int = 0o755) -> Path:
        """Create the file with a trivial shell body and apply `mode`."""

        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
        path.chmod(mode)
        return path

    return _make


@pytest.fixture(autouse=True)
def _reset_loguru() -> Iterator[None]:
    """Drop sinks installed by a test and restore the package's silent default."""

    yield
    logger.remove()
    logger.disable("agentlocator")
