#!/usr/bin/env python3
"""
migration_converter.cli.cli

Typer-based CLI for running test-framework source migrations.

Examples
--------
Preview which files a migration would see:

    migrate-tests convert ./tests --dry-run --include "**/*.js"

Run a plugin migration and print the result as JSON:

    migrate-tests convert ./tests -m wdio-to-playwright \\
        --plugin-module ./my_migrations.py --json
"""

from __future__ import annotations

import json
import logging
import traceback

import typer

from migration_converter.application.progress import ProgressEvent
from migration_converter.application.results import ConversionResult
from migration_converter.errors import ConversionError, PluginError

app = typer.Typer(
    name="migrate-tests",
    help="Analyze, validate and transform test sources between frameworks.",
    no_args_is_help=True,
)

PLUGIN_MODULE_HELP = "Plugin module import path or file path (repeatable)."
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Parameters
    ----------
    exc : Exception
        Exception raised before or around the run.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.secho(f"✗ {type(exc).__name__}: {exc}", fg=typer.colors.RED, err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(exc)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _coerce_option_value(raw: str) -> object:
    """Best-effort coercion for CLI key/value options."""
    lowered = raw.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        if "." in raw:
            return float(raw)
        return int(raw)
    except ValueError:
        return raw


def _parse_config_overrides(option_items: list[str] | None) -> dict[str, object]:
    """Parse repeatable KEY=VALUE configuration overrides."""
    parsed: dict[str, object] = {}
    for item in option_items or []:
        if "=" not in item:
            raise typer.BadParameter(
                f"Invalid config entry '{item}'. Use KEY=VALUE format."
            )
        key, raw_value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter("Config key cannot be empty.")
        parsed[key] = _coerce_option_value(raw_value)
    return parsed


def _echo_progress(event: ProgressEvent) -> None:
    suffix = f" [{event.current_file}]" if event.current_file else ""
    typer.echo(f"{event.progress:5.1f}% {event.phase}: {event.message}{suffix}", err=True)


def _print_result(result: ConversionResult, migration: str) -> None:
    """Print a run summary followed by its errors and warnings."""
    stats = result.stats
    summary = (
        f"{migration}: {stats.processed_files} processed, "
        f"{stats.skipped_files} skipped, {len(result.errors)} error(s), "
        f"{len(result.warnings)} warning(s) in {result.duration:.1f} ms"
    )
    if result.success:
        typer.secho(f"✓ {summary}", fg=typer.colors.GREEN)
    else:
        typer.secho(f"✗ {summary}", fg=typer.colors.RED, err=True)
    for error in result.errors:
        location = ""
        if error.file:
            location = f" ({error.file}:{error.line})" if error.line else f" ({error.file})"
        typer.echo(f"  error {error.code}: {error.message}{location}", err=True)
    for warning in result.warnings:
        hint = f" Suggestion: {warning.suggestion}" if warning.suggestion else ""
        typer.echo(f"  warning {warning.code}: {warning.message}{hint}", err=True)


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Initialize shared CLI state and logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    ctx.obj = {"debug": debug, "verbose": verbose}


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Source directory or file to migrate."),
    migration: str = typer.Option(
        "inventory", "--migration", "-m", help="Registered migration name."
    ),
    target: str | None = typer.Option(
        None, "--target", help="Directory for converted files."
    ),
    plugin_module: list[str] | None = typer.Option(
        None, "--plugin-module", help=PLUGIN_MODULE_HELP
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Preview changes; continue past validation errors."
    ),
    backup: bool | None = typer.Option(
        None, "--backup/--no-backup", help="Back up files before modifying them."
    ),
    backup_dir: str | None = typer.Option(
        None, "--backup-dir", help="Backup directory (default: .backup)."
    ),
    include: list[str] | None = typer.Option(
        None, "--include", help="Glob of files to include (repeatable)."
    ),
    exclude: list[str] | None = typer.Option(
        None, "--exclude", help="Glob of files to exclude (repeatable)."
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", min=1, help="Parallel file operations hint."
    ),
    config: list[str] | None = typer.Option(
        None, "--config", help="Migration config override KEY=VALUE (repeatable)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    show_progress: bool = typer.Option(
        False, "--progress", help="Print progress events to stderr."
    ),
) -> None:
    """Run a migration over SOURCE.

    Exit code is 0 when the run succeeds, 1 when it reports errors, and the
    error's own exit code when options or the migration cannot be resolved.
    """
    debug: bool = bool(ctx.obj.get("debug", False))
    verbose: bool = bool(ctx.obj.get("verbose", False))
    overrides = _parse_config_overrides(config)

    try:
        from migration_converter.api import run_migration

        result = run_migration(
            source,
            migration=migration,
            plugin_modules=plugin_module,
            target=target,
            dry_run=dry_run or None,
            backup=backup,
            backup_dir=backup_dir,
            include=include,
            exclude=exclude,
            concurrency=concurrency,
            verbose=verbose or None,
            config=overrides,
            listeners=[_echo_progress] if show_progress else [],
        )
    except ConversionError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result, migration)
    if not result.success:
        raise typer.Exit(code=1)


@app.command("migrations")
def migrations_cmd(
    ctx: typer.Context,
    plugin_module: list[str] | None = typer.Option(
        None, "--plugin-module", help=PLUGIN_MODULE_HELP
    ),
) -> None:
    """List registered migrations."""
    debug: bool = bool(ctx.obj.get("debug", False))
    try:
        from migration_converter.migrations.registry import create_default_registry

        registry = create_default_registry(extra_modules=plugin_module)
    except PluginError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    for name in registry.names():
        typer.echo(name)


if __name__ == "__main__":
    app()
