"""Plan and validation records exchanged between pipeline phases."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePosixPath

from migration_converter.types import (
    Complexity,
    ConfigChangeType,
    Severity,
    ValidationErrorType,
    ValidationWarningType,
)


@dataclass(frozen=True)
class SourceFile:
    """A source file as read by the analyzer."""

    path: str
    content: str
    extension: str
    relative_path: str
    size: int
    last_modified: datetime

    @classmethod
    def from_text(
        cls,
        path: str,
        content: str,
        *,
        relative_path: str | None = None,
        last_modified: datetime | None = None,
    ) -> SourceFile:
        """Build a record for in-memory content."""
        posix = PurePosixPath(path.replace("\\", "/"))
        return cls(
            path=path,
            content=content,
            extension=posix.suffix,
            relative_path=relative_path if relative_path is not None else posix.name,
            size=len(content.encode("utf-8")),
            last_modified=last_modified or datetime.now(),
        )


@dataclass(frozen=True)
class TransformationStep:
    """A named transformation applied to one file."""

    type: str
    description: str
    priority: int = 0
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileConversionPlan:
    """Planned changes for a single file."""

    source: SourceFile
    target_path: str
    transformations: tuple[TransformationStep, ...] = ()
    complexity: Complexity = "low"

    def dangling_dependencies(self) -> list[tuple[str, str]]:
        """Return ``(step, dependency)`` pairs naming unknown steps."""
        names = {step.type for step in self.transformations}
        return [
            (step.type, dependency)
            for step in self.transformations
            for dependency in step.dependencies
            if dependency not in names
        ]


@dataclass(frozen=True)
class PotentialIssue:
    """Risk flagged during analysis."""

    severity: Severity
    description: str
    affected_files: tuple[str, ...] = ()
    resolution: str | None = None


@dataclass(frozen=True)
class ConfigChange:
    """Required change to a project configuration file."""

    file: str
    type: ConfigChangeType
    changes: Mapping[str, object] = field(default_factory=dict)
    requires_confirmation: bool = False


@dataclass(frozen=True)
class ConversionPlan:
    """Output of the analysis phase."""

    files: tuple[FileConversionPlan, ...] = ()
    estimated_duration: float = 0.0
    required_disk_space: int = 0
    potential_issues: tuple[PotentialIssue, ...] = ()
    config_changes: tuple[ConfigChange, ...] = ()


@dataclass(frozen=True)
class SourceLocation:
    """Span inside a source file."""

    start_line: int
    start_column: int
    end_line: int | None = None
    end_column: int | None = None


@dataclass(frozen=True)
class ValidationIssue:
    """Blocking problem found while validating a plan."""

    type: ValidationErrorType
    message: str
    file: str | None = None
    location: SourceLocation | None = None


@dataclass(frozen=True)
class ValidationWarning:
    """Non-blocking finding from plan validation."""

    type: ValidationWarningType
    message: str
    file: str | None = None
    location: SourceLocation | None = None
    suggestion: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of the validation phase."""

    valid: bool
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationWarning, ...] = ()
