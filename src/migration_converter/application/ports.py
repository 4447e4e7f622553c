"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from migration_converter.application.plan import (
    ConversionPlan,
    SourceFile,
    ValidationResult,
)
from migration_converter.application.progress import ProgressEvent
from migration_converter.application.results import ConversionResult, ProcessedFile
from migration_converter.types import ConfigFileType, ConflictType

if TYPE_CHECKING:
    from migration_converter.application.context import RunContext


class Analyzer(Protocol):
    """Read the source tree into a conversion plan."""

    async def analyze(self, context: RunContext) -> ConversionPlan:
        """Return the plan; raise on failure (no partial plans)."""


class Validator(Protocol):
    """Check a plan before any file is transformed."""

    async def validate(
        self, plan: ConversionPlan, context: RunContext
    ) -> ValidationResult:
        """Return validity with errors and warnings."""


class Transformer(Protocol):
    """Apply a validated plan."""

    async def transform(
        self, plan: ConversionPlan, context: RunContext
    ) -> ConversionResult:
        """Return the run result including stats and file lists."""


@runtime_checkable
class MigrationStrategy(Protocol):
    """One source/target framework migration (e.g. ``wdio-to-playwright``)."""

    name: str

    async def analyze(self, context: RunContext) -> ConversionPlan: ...

    async def validate(
        self, plan: ConversionPlan, context: RunContext
    ) -> ValidationResult: ...

    async def transform(
        self, plan: ConversionPlan, context: RunContext
    ) -> ConversionResult: ...


class ProgressListener(Protocol):
    """Receives one progress event per call, synchronously."""

    def __call__(self, event: ProgressEvent) -> None: ...


class PatternMatcher(Protocol):
    """Glob engine used by the file filter."""

    def matches(self, path: str, pattern: str) -> bool:
        """Return ``True`` when ``path`` matches ``pattern``."""


# Configuration discovery and merging


@dataclass(frozen=True)
class ConfigFile:
    """A discovered project configuration file."""

    path: str
    type: ConfigFileType
    content: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ConfigConflict:
    """A key whose value differs between merged configuration sources."""

    key: str
    values: tuple[tuple[str, object], ...]
    resolution: object | None = None


@dataclass(frozen=True)
class ResolvedConfig:
    """Merged configuration plus the conflicts encountered."""

    config: Mapping[str, object]
    conflicts: tuple[ConfigConflict, ...] = ()


class ConfigReader(Protocol):
    async def read_config(self, path: str) -> Mapping[str, object]: ...

    async def find_configs(self, directory: str) -> Sequence[ConfigFile]: ...


class ConfigResolver(Protocol):
    async def resolve_conflicts(self, configs: Sequence[ConfigFile]) -> ResolvedConfig: ...

    def merge_configs(
        self, configs: Sequence[Mapping[str, object]]
    ) -> Mapping[str, object]: ...


class ConfigUpdater(Protocol):
    async def update_config(self, path: str, changes: Mapping[str, object]) -> None: ...

    async def create_config(self, path: str, content: Mapping[str, object]) -> None: ...


# Files and backups


@dataclass(frozen=True)
class BackupInfo:
    """Where a file was backed up."""

    original_path: str
    backup_path: str
    timestamp: datetime
    size: int


class FileReader(Protocol):
    async def read_file(self, path: str) -> SourceFile: ...

    async def read_files(self, paths: Sequence[str]) -> Sequence[SourceFile]: ...

    async def find_files(self, pattern: str) -> Sequence[str]: ...


class FileWriter(Protocol):
    async def write_file(self, file: ProcessedFile) -> None: ...

    async def write_files(self, files: Sequence[ProcessedFile]) -> None: ...


class BackupManager(Protocol):
    async def create_backup(self, file: SourceFile) -> str:
        """Back up ``file`` and return the backup path."""

    async def restore_backup(self, backup_path: str) -> None: ...

    async def cleanup_backups(self) -> None: ...


# Syntax trees


type AstNode = Mapping[str, object]


class AstParser(Protocol):
    def parse(self, code: str, options: Mapping[str, object] | None = None) -> AstNode: ...


class AstTransformer(Protocol):
    def transform(self, ast: AstNode, visitors: Mapping[str, object]) -> AstNode: ...


class AstGenerator(Protocol):
    def generate(self, ast: AstNode, options: Mapping[str, object] | None = None) -> str: ...


# Interactive conflict resolution


@dataclass(frozen=True)
class ResolutionOption:
    id: str
    label: str
    description: str
    impact: str | None = None


@dataclass(frozen=True)
class ConflictResolution:
    type: ConflictType
    description: str
    options: tuple[ResolutionOption, ...]
    default_option: str | None = None
