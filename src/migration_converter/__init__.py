"""Top-level API for orchestrating test-framework source migrations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from migration_converter.application.progress import ProgressCallback
from migration_converter.application.results import ConversionResult

__version__ = "0.1.0"


def run_migration(
    source: str,
    *,
    migration: str = "inventory",
    plugin_modules: Iterable[str] | None = None,
    target: str | None = None,
    dry_run: bool | None = None,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    concurrency: int | None = None,
    config: Mapping[str, object] | None = None,
    listeners: Iterable[ProgressCallback] = (),
) -> ConversionResult:
    """Run a registered migration over a source tree.

    Parameters
    ----------
    source : str
        Source directory or file.
    migration : str, default="inventory"
        Registered migration name.
    plugin_modules : Iterable[str] | None, optional
        Import paths or file paths of modules registering more migrations.
    target : str | None, optional
        Target directory for converted files.
    dry_run : bool | None, optional
        Continue past validation failures and preview only.
    include, exclude : list[str] | None, optional
        Glob patterns relative to ``source``. Exclude wins.
    concurrency : int | None, optional
        Parallelism hint forwarded to the migration.
    config : Mapping[str, object] | None, optional
        Migration-specific overrides.
    listeners : Iterable[ProgressCallback], optional
        Progress callbacks, called synchronously.

    Returns
    -------
    ConversionResult
        Result of the run. Failures are reported in ``errors`` rather than
        raised, except for invalid options or unknown migrations.
    """
    from .api import run_migration as _impl

    return _impl(
        source,
        migration=migration,
        plugin_modules=plugin_modules,
        target=target,
        dry_run=dry_run,
        include=include,
        exclude=exclude,
        concurrency=concurrency,
        config=config,
        listeners=listeners,
    )


__all__ = ["ConversionResult", "run_migration"]
