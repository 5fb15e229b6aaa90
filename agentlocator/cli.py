"""Command-line interface for agentlocator.

Responsibilities:
- Expose user-facing commands for locating and launching an external tool.
- Convert CLI arguments into `LocatorConfig` and run discovery.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

from loguru import logger as loguru_logger
import typer

from .cli_rendering import echo_attempts, exit_with_command_error
from .config import ConfigLoader, ConfigSources, LocatorConfig
from .errors import LocatorStageError
from .launcher import ShellInteractiveRunner, build_launch_command, execute
from .notifications import Severity, TerminalNotifier
from .resolver import ResolutionResult, resolve_agent_path
from .telemetry.logger import DiscoveryLogger

app = typer.Typer(
    name="agentlocator",
    no_args_is_help=True,
    help="Locate and launch external command-line tools.",
)

WorkDirOption = Annotated[
    Path | None,
    typer.Option("--work-dir", help="Working directory for lookup commands and launches."),
]
ToolOption = Annotated[
    str | None,
    typer.Option("--tool", help="Command name to locate (default `cursor-agent`)."),
]
OverrideEnvOption = Annotated[
    str | None,
    typer.Option(
        "--override-env",
        help="Environment variable holding an explicit tool path (default `CURSOR_AGENT`).",
    ),
]
TimeoutOption = Annotated[
    str | None,
    typer.Option(
        "--timeout",
        help="Per-strategy timeout in seconds; `none` waits indefinitely.",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with discovery defaults."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log every discovery step to stderr."),
]


def _load_yaml_config(config_path: Path | None) -> LocatorConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise LocatorStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise LocatorStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise LocatorStageError(
            stage="config",
            detail=f"Failed to read config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _resolve_command_config(
    config_file: Path | None,
    work_dir: Path | None,
    tool: str | None,
    override_env: str | None,
    timeout: str | None,
) -> LocatorConfig:
    """Resolve effective settings from YAML defaults, environment, and CLI overrides."""

    base_config = _load_yaml_config(config_file) or LocatorConfig()

    cli_values: dict[str, str] = {}
    if work_dir is not None:
        cli_values["work_dir"] = str(work_dir)
    if tool is not None:
        cli_values["tool_name"] = tool
    if override_env is not None:
        cli_values["override_env"] = override_env
    if timeout is not None:
        cli_values["timeout_seconds"] = timeout

    try:
        return base_config.resolved(ConfigSources(cli=cli_values, env=os.environ))
    except ValueError as exc:
        raise LocatorStageError(
            stage="config",
            detail=f"Invalid discovery settings: {exc}",
            hint="Check `--tool`, `--override-env`, `--timeout` and `AGENTLOCATOR_*` variables.",
        ) from exc


def _run_discovery(config: LocatorConfig, verbose: bool) -> ResolutionResult:
    """Run one discovery attempt, optionally with step logging to stderr."""

    if not verbose:
        return resolve_agent_path(config.to_request())

    # Console script only: drop loguru's default stderr handler.
    loguru_logger.remove()
    logger = DiscoveryLogger.to_stderr()
    try:
        result = resolve_agent_path(config.to_request(), logger=logger)
    finally:
        logger.close()
    echo_attempts(result)
    return result


def _not_found_message(config: LocatorConfig) -> str:
    """Return the user-facing message for a tool that could not be located."""

    message = f"Could not locate `{config.tool_name}`."
    if config.override_env is not None:
        message += f" Install it or set `{config.override_env}` to its full path."
    return message


@app.command("locate")
def locate_command(
    work_dir: WorkDirOption = None,
    tool: ToolOption = None,
    override_env: OverrideEnvOption = None,
    timeout: TimeoutOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the absolute path of the tool, or exit 1 when it cannot be located."""

    try:
        config = _resolve_command_config(config_file, work_dir, tool, override_env, timeout)
        result = _run_discovery(config, verbose)
    except Exception as exc:
        exit_with_command_error("locate", exc)

    if result.path is None:
        TerminalNotifier().notify(_not_found_message(config), Severity.ERROR)
        raise typer.Exit(code=1)
    typer.echo(result.path)


@app.command("launch")
def launch_command(
    args: Annotated[
        list[str] | None,
        typer.Argument(help="Arguments passed to the tool (place after `--`)."),
    ] = None,
    work_dir: WorkDirOption = None,
    tool: ToolOption = None,
    override_env: OverrideEnvOption = None,
    timeout: TimeoutOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Locate the tool and run it interactively in the working directory."""

    notifier = TerminalNotifier()
    try:
        config = _resolve_command_config(config_file, work_dir, tool, override_env, timeout)
        result = _run_discovery(config, verbose)
    except Exception as exc:
        exit_with_command_error("launch", exc)

    if result.path is None:
        notifier.notify(_not_found_message(config), Severity.ERROR)
        raise typer.Exit(code=1)

    runner = ShellInteractiveRunner()
    command_line = build_launch_command(
        result.path,
        work_dir=config.work_dir,
        args=args or [],
        windows=runner.windows,
    )
    if verbose:
        notifier.notify(f"Running: {command_line}", Severity.INFO)
    exit_code = execute(runner, notifier, command_line)
    if exit_code is None:
        raise typer.Exit(code=1)
    raise typer.Exit(code=exit_code)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
