"""Top-level package for agentlocator.

This package locates an absolute, executable path to an external command-line
tool (by default `cursor-agent`) across Windows and POSIX shell setups. The main
entry points are `resolve` and `resolve_agent_path`.
"""

from loguru import logger

from .paths import expand_home, shell_quote
from .resolver import ResolutionRequest, ResolutionResult, resolve, resolve_agent_path

logger.disable("agentlocator")

__all__ = [
    "ResolutionRequest",
    "ResolutionResult",
    "__version__",
    "expand_home",
    "resolve",
    "resolve_agent_path",
    "shell_quote",
]

__version__ = "0.1.0"
