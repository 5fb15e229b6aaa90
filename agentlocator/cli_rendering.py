"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and discovery attempt listings.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import LocatorStageError
from .resolver import ResolutionResult


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, LocatorStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_attempts(result: ResolutionResult) -> None:
    """Print one row per attempted strategy, in attempt order."""

    for outcome in result.attempts:
        if outcome.found:
            typer.echo(f"  hit  {outcome.strategy}: {outcome.path}", err=True)
        else:
            typer.echo(f"  miss {outcome.strategy}: {outcome.failure}", err=True)
    if result.source is not None:
        typer.echo(f"Source: {result.source}", err=True)
