"""Typed run configuration and the option normalizer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from pydantic import ValidationError

from migration_converter.errors import ConfigurationError
from migration_converter.schemas import ConversionOptions

DEFAULT_BACKUP_DIR = ".backup"
DEFAULT_CONCURRENCY = 5
DEFAULT_INCLUDE: tuple[str, ...] = ("**/*",)
DEFAULT_EXCLUDE: tuple[str, ...] = ("**/node_modules/**", "**/.git/**")


@dataclass(frozen=True)
class RunConfiguration:
    """Normalized options for one migration run."""

    source: str
    target: str | None = None
    dry_run: bool = False
    backup: bool = True
    backup_dir: str = DEFAULT_BACKUP_DIR
    preserve_structure: bool = True
    interactive: bool = False
    verbose: bool = False
    concurrency: int = DEFAULT_CONCURRENCY
    include: tuple[str, ...] = DEFAULT_INCLUDE
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    config: Mapping[str, object] = field(default_factory=dict)


type OptionsInput = RunConfiguration | ConversionOptions | Mapping[str, object]


def _default(value: object, fallback: object) -> object:
    return fallback if value is None else value


def normalize_options(options: OptionsInput) -> RunConfiguration:
    """Fill unset option fields with their defaults.

    Parameters
    ----------
    options : RunConfiguration | ConversionOptions | Mapping[str, object]
        Raw or already-normalized options. Mappings may use snake_case or
        camelCase keys.

    Returns
    -------
    RunConfiguration
        Options with every field defined. Normalizing a ``RunConfiguration``
        returns it unchanged.

    Raises
    ------
    ConfigurationError
        If the raw options fail validation.
    """
    if isinstance(options, RunConfiguration):
        return options
    if not isinstance(options, ConversionOptions):
        try:
            options = ConversionOptions.model_validate(dict(options))
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid run options: {exc}", "INVALID_OPTIONS"
            ) from exc

    include = options.include if options.include is not None else DEFAULT_INCLUDE
    exclude = options.exclude if options.exclude is not None else DEFAULT_EXCLUDE
    return RunConfiguration(
        source=options.source,
        target=options.target,
        dry_run=bool(_default(options.dry_run, False)),
        backup=bool(_default(options.backup, True)),
        backup_dir=str(_default(options.backup_dir, DEFAULT_BACKUP_DIR)),
        preserve_structure=bool(_default(options.preserve_structure, True)),
        interactive=bool(_default(options.interactive, False)),
        verbose=bool(_default(options.verbose, False)),
        concurrency=int(_default(options.concurrency, DEFAULT_CONCURRENCY)),
        include=tuple(include),
        exclude=tuple(exclude),
        config=dict(options.config or {}),
    )


def build_run_options(
    *,
    source: str,
    target: str | None = None,
    dry_run: bool | None = None,
    backup: bool | None = None,
    backup_dir: str | None = None,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    concurrency: int | None = None,
    verbose: bool | None = None,
    config: Mapping[str, object] | None = None,
) -> RunConfiguration:
    """Build normalized options from command/API params."""
    raw: dict[str, object] = {
        "source": source,
        "target": target,
        "dry_run": dry_run,
        "backup": backup,
        "backup_dir": backup_dir,
        "include": include or None,
        "exclude": exclude or None,
        "concurrency": concurrency,
        "verbose": verbose,
        "config": dict(config) if config else None,
    }
    return normalize_options(raw)
