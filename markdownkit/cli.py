"""Command-line interface for markdownkit.

Responsibilities:
- Expose the `autoformat` (rule-engine) and `draft` (structure + NLP) commands.
- Convert CLI arguments into `ProcessingOptions` and run the file-level API.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_batch_summary,
    echo_file_results,
    echo_plugin_warning,
    exit_with_command_error,
)
from .config import ConfigLoader, ProcessingOptions, ProcessingOptionsBuilder
from .errors import PipelineStageError, PluginLoadError, ValidationError
from .models.datatypes import FileFormatResult
from .pipeline import TextProcessor
from .rules.loader import load_rule_sets
from .rules.typography import TYPOGRAPHY_RULE_SET
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="markdownkit",
    no_args_is_help=True,
    help="Turn plain-text notes into structured markdown.",
)

SUPPORTED_SUFFIXES = frozenset({".txt", ".md", ".mdx", ".mdc", ".mdd"})
_IGNORED_DIRECTORIES = frozenset({"node_modules", ".git"})


def collect_input_files(paths: list[Path], recursive: bool) -> list[Path]:
    """Expand CLI path arguments into an ordered list of files to format."""

    collected: list[Path] = []
    for path in paths:
        if path.is_dir():
            if not recursive:
                raise PipelineStageError(
                    stage="input",
                    detail=f"`{path}` is a directory.",
                    hint="Use `--recursive` to process directories.",
                )
            collected.extend(
                sorted(
                    candidate
                    for candidate in path.rglob("*")
                    if candidate.is_file()
                    and candidate.suffix in SUPPORTED_SUFFIXES
                    and not _IGNORED_DIRECTORIES.intersection(candidate.parts)
                )
            )
        elif path.exists():
            collected.append(path)
        else:
            raise PipelineStageError(
                stage="input",
                detail=f"Cannot access `{path}`.",
                hint="Pass existing files or directories.",
            )
    return collected


def _load_yaml_options(config_path: Path | None) -> ProcessingOptions | None:
    """Load YAML options when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config keys/values and rerun.",
        ) from exc
    except Exception as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def _build_processor(
    options: ProcessingOptions,
    rule_sets: list[object],
    plugin_dir: Path | None,
    verbose: bool,
) -> TextProcessor:
    """Build a processor, dropping plugin rule sets that fail validation."""

    run_logger = RunLogger(sink=sys.stderr) if verbose else None
    try:
        return TextProcessor(options, rule_sets, run_logger)
    except ValidationError as exc:
        echo_plugin_warning(plugin_dir, exc)
        return TextProcessor(options, (), run_logger)


def _load_plugins(plugin_dir: Path | None, quiet: bool) -> list[object]:
    """Load plugin rule sets; load failures are reported and skipped."""

    if plugin_dir is None:
        return []
    try:
        rule_sets = load_rule_sets(plugin_dir)
    except PluginLoadError as exc:
        echo_plugin_warning(plugin_dir, exc)
        return []
    if not quiet:
        typer.echo(f"Loaded plugins from {plugin_dir}")
    return rule_sets


def _exit_for_results(results: list[FileFormatResult]) -> None:
    """Exit with code 1 when any file failed."""

    if any(not result.success for result in results):
        raise typer.Exit(code=1)


@app.command("autoformat")
def autoformat_command(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Files or directories to auto-format in place."),
    ],
    plugins: Annotated[
        Path | None,
        typer.Option("--plugins", help="Directory with `*.py` plugin rule sets."),
    ] = None,
    semantic: Annotated[
        bool,
        typer.Option("--semantic", help="Split long lines at sentence boundaries."),
    ] = False,
    smart_quotes: Annotated[
        bool,
        typer.Option("--smart-quotes", help="Convert straight quotes to curly quotes."),
    ] = False,
    ellipsis: Annotated[
        bool,
        typer.Option("--ellipsis", help="Convert `...` to the ellipsis character."),
    ] = False,
    typography: Annotated[
        bool,
        typer.Option(
            "--typography",
            help="Register the bundled typography rules (dashes, arrows, symbols).",
        ),
    ] = False,
    auto: Annotated[
        bool,
        typer.Option("--auto", help="Enable semantic breaks, smart quotes, and ellipsis."),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", min=1, help="Line width for semantic breaks."),
    ] = 88,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Process directories recursively."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress output except errors."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log processing stages to stderr."),
    ] = False,
) -> None:
    """Convert plain text to structured markdown with the rule engine."""

    try:
        files = collect_input_files(paths, recursive)
        options = (
            ProcessingOptionsBuilder()
            .with_semantic_breaks(auto or semantic)
            .with_wrap_width(width)
            .with_typography(
                quotes=auto or smart_quotes,
                ellipsis=auto or ellipsis,
                dashes=False,
            )
            .build()
        )
    except Exception as exc:
        exit_with_command_error("autoformat", exc)

    if not files:
        typer.echo("No files found to auto-format.")
        return

    rule_sets = _load_plugins(plugins, quiet)
    if typography:
        rule_sets.insert(0, TYPOGRAPHY_RULE_SET)
    processor = _build_processor(options, rule_sets, plugins, verbose)

    if not quiet:
        typer.echo(f"Processing {len(files)} file(s)...")
    results = processor.format_files(files, write=True, autoformat=True)
    echo_file_results(results, quiet=quiet)
    if not quiet:
        echo_batch_summary("Auto-format", results)
    _exit_for_results(results)


@app.command("draft")
def draft_command(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Files or directories with rough notes to transform."),
    ],
    header_level: Annotated[
        int | None,
        typer.Option("--header-level", min=1, max=6, help="Heading depth for folder lines."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print output without writing files."),
    ] = False,
    no_nlp: Annotated[
        bool,
        typer.Option("--no-nlp", help="Use basic cleanup instead of the NLP pass."),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML file with processing options."),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Process directories recursively."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress output except errors."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log processing stages to stderr."),
    ] = False,
) -> None:
    """Transform rough text into markdown (structure detection plus NLP cleanup)."""

    try:
        files = collect_input_files(paths, recursive)
        builder = ProcessingOptionsBuilder(_load_yaml_options(config_file))
        if header_level is not None:
            builder.with_header_level(header_level)
        if no_nlp:
            builder.with_nlp(False)
        options = builder.build()
    except Exception as exc:
        exit_with_command_error("draft", exc)

    if not files:
        typer.echo("No files found to transform.")
        return

    processor = _build_processor(options, [], None, verbose)
    if not quiet and not dry_run:
        typer.echo(f"Processing {len(files)} file(s)...")
    results = asyncio.run(processor.aformat_files(files, write=not dry_run))
    echo_file_results(results, quiet=quiet, dry_run=dry_run)
    if not quiet and not dry_run:
        echo_batch_summary("Draft", results)
    _exit_for_results(results)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
