"""Public synchronous migration API (delegates to application use-cases)."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Optional

from migration_converter.application.options import build_run_options
from migration_converter.application.progress import ProgressCallback
from migration_converter.application.results import ConversionResult
from migration_converter.application.use_cases import run_conversion
from migration_converter.migrations.registry import resolve_migration


def run_migration(
    source: str,
    *,
    migration: str = "inventory",
    plugin_modules: Optional[Iterable[str]] = None,
    target: Optional[str] = None,
    dry_run: Optional[bool] = None,
    backup: Optional[bool] = None,
    backup_dir: Optional[str] = None,
    include: Optional[list[str]] = None,
    exclude: Optional[list[str]] = None,
    concurrency: Optional[int] = None,
    verbose: Optional[bool] = None,
    config: Optional[Mapping[str, object]] = None,
    listeners: Iterable[ProgressCallback] = (),
) -> ConversionResult:
    """Run a registered migration over ``source`` and return its result."""
    strategy = resolve_migration(migration, plugin_modules)
    options = build_run_options(
        source=source,
        target=target,
        dry_run=dry_run,
        backup=backup,
        backup_dir=backup_dir,
        include=include,
        exclude=exclude,
        concurrency=concurrency,
        verbose=verbose,
        config=config,
    )
    return asyncio.run(
        run_conversion(strategy=strategy, options=options, listeners=listeners)
    )
