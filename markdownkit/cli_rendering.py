"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
per-file outcomes, dry-run previews, and batch summaries.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import FileFormatResult


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
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


def echo_plugin_warning(plugin_dir: object, exc: Exception) -> None:
    """Print a non-fatal plugin loading warning."""

    typer.secho(
        f"Warning: could not load plugins from `{plugin_dir}`: {exc}",
        fg=typer.colors.YELLOW,
        err=True,
    )


def echo_file_results(
    results: Sequence[FileFormatResult],
    *,
    quiet: bool,
    dry_run: bool = False,
) -> None:
    """Print one line per file; failures are always printed to stderr."""

    for result in results:
        if not result.success:
            typer.secho(
                f"Error formatting {result.path}: {result.error}",
                fg=typer.colors.RED,
                err=True,
            )
            continue
        if dry_run:
            typer.echo(f"--- {result.path} ---")
            typer.echo(result.formatted or "", nl=False)
        elif not quiet:
            typer.echo(f"Formatted: {result.path}")


def echo_batch_summary(title: str, results: Sequence[FileFormatResult]) -> None:
    """Print succeeded/failed file counts for one batch run."""

    succeeded = sum(1 for result in results if result.success)
    failed = len(results) - succeeded
    typer.echo(f"{title} summary")
    typer.echo(f"Succeeded: {succeeded} file(s)")
    if failed:
        typer.echo(f"Failed: {failed} file(s)")
