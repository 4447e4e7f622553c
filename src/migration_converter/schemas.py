"""Pydantic schemas for runtime validation of migration run options."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ConversionOptions(BaseModel):
    """Raw run options as supplied by a caller.

    Every field except ``source`` may be left unset; unset fields are filled
    by ``normalize_options``. Keys are accepted in snake_case or camelCase
    (``dry_run`` / ``dryRun``).
    """

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    source: str = Field(min_length=1)
    target: str | None = None
    dry_run: bool | None = None
    backup: bool | None = None
    backup_dir: str | None = None
    include: list[str] | None = None
    exclude: list[str] | None = None
    preserve_structure: bool | None = None
    interactive: bool | None = None
    verbose: bool | None = None
    config: dict[str, object] | None = None
    concurrency: int | None = Field(default=None, ge=1)

    @field_validator("source", "target", "backup_dir", mode="before")
    @classmethod
    def _coerce_path(cls, value: object) -> object:
        if isinstance(value, Path):
            return str(value)
        return value

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _coerce_patterns(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        if isinstance(value, tuple):
            return list(value)
        return value

    @field_validator("include", "exclude")
    @classmethod
    def _validate_patterns(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and any(not item.strip() for item in value):
            raise ValueError("glob patterns cannot contain empty entries.")
        return value


class MigrationSelection(BaseModel):
    """Validated input for migration registry lookups."""

    model_config = ConfigDict(extra="forbid")

    migration: str = Field(min_length=1)
    plugin_modules: list[str] = Field(default_factory=list)

    @field_validator("migration")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("migration name cannot be blank.")
        return stripped
