"""Application-layer result objects."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import cast

from pydantic.alias_generators import to_camel

from migration_converter.application.plan import SourceFile
from migration_converter.types import ChangeType


@dataclass(frozen=True)
class FileChange:
    """One discrete change applied to a file."""

    type: ChangeType
    description: str
    line: int | None = None
    column: int | None = None
    before: str | None = None
    after: str | None = None


@dataclass(frozen=True)
class ProcessedFile:
    """A file the transformer handled."""

    source: SourceFile
    target: SourceFile
    changes: tuple[FileChange, ...] = ()
    modified: bool = False
    backup_path: str | None = None


@dataclass(frozen=True)
class SkippedFile:
    """A file the transformer left untouched, with the reason."""

    file: SourceFile
    reason: str


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error reported in a result."""

    code: str
    message: str
    file: str | None = None
    line: int | None = None
    column: int | None = None
    stack: str | None = None
    recoverable: bool = False


@dataclass(frozen=True)
class WarningRecord:
    """Structured warning reported in a result."""

    code: str
    message: str
    file: str | None = None
    line: int | None = None
    suggestion: str | None = None


@dataclass(frozen=True)
class ConversionStats:
    """Aggregate counters for a run."""

    total_files: int = 0
    processed_files: int = 0
    skipped_files: int = 0
    error_files: int = 0
    total_changes: int = 0
    total_errors: int = 0
    total_warnings: int = 0


@dataclass(frozen=True)
class ConversionResult:
    """Terminal artifact of one migration run."""

    success: bool
    processed_files: tuple[ProcessedFile, ...] = ()
    skipped_files: tuple[SkippedFile, ...] = ()
    errors: tuple[ErrorRecord, ...] = ()
    warnings: tuple[WarningRecord, ...] = ()
    stats: ConversionStats = field(default_factory=ConversionStats)
    duration: float = 0.0

    def with_duration(self, duration: float) -> ConversionResult:
        """Return a copy with ``duration`` (milliseconds) replaced."""
        return dataclasses.replace(self, duration=duration)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable mapping with camelCase keys."""
        return cast(dict[str, object], _to_plain(self))


def _to_plain(value: object) -> object:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            to_camel(item.name): _to_plain(getattr(value, item.name))
            for item in dataclasses.fields(value)
            if getattr(value, item.name) is not None
        }
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(key): _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value
