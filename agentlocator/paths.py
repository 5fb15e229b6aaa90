"""Filesystem and shell string helpers used by executable discovery.

Responsibilities:
- Expand a leading `~` the way interactive shells do for override values.
- Quote arbitrary strings for literal use inside POSIX shell command lines.
- Check whether a candidate path is an executable regular file.
"""

from __future__ import annotations

import os
from pathlib import Path


def expand_home(path: str | None) -> str | None:
    """Replace a leading `~` (alone or followed by a separator) with the home directory.

    Other `~` forms such as `~user/bin` are returned unchanged.
    """

    if path is None:
        return None
    home = str(Path.home())
    if path == "~":
        return home
    if path.startswith("~" + os.sep):
        return home + path[1:]
    return path


def shell_quote(value: str | None) -> str:
    """Wrap a value in single quotes, escaping embedded quotes as `'\\''`."""

    if value is None:
        return "''"
    return "'" + value.replace("'", "'\\''") + "'"


def is_executable_file(path: str | Path) -> bool:
    """Return whether the path is an existing regular file executable by this process."""

    candidate = Path(path)
    try:
        return candidate.is_file() and os.access(candidate, os.X_OK)
    except (OSError, ValueError):
        return False
