"""Application-layer use-cases, ports and option objects."""

from __future__ import annotations

from migration_converter.application.context import RunContext
from migration_converter.application.diagnostics import DiagnosticsAggregator
from migration_converter.application.file_filter import FileFilter
from migration_converter.application.options import (
    RunConfiguration,
    build_run_options,
    normalize_options,
)
from migration_converter.application.plan import (
    ConfigChange,
    ConversionPlan,
    FileConversionPlan,
    PotentialIssue,
    SourceFile,
    SourceLocation,
    TransformationStep,
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
)
from migration_converter.application.progress import ProgressEmitter, ProgressEvent
from migration_converter.application.results import (
    ConversionResult,
    ConversionStats,
    ErrorRecord,
    FileChange,
    ProcessedFile,
    SkippedFile,
    WarningRecord,
)
from migration_converter.application.use_cases import (
    Converter,
    PipelineState,
    run_conversion,
)

__all__ = [
    "ConfigChange",
    "ConversionPlan",
    "ConversionResult",
    "ConversionStats",
    "Converter",
    "DiagnosticsAggregator",
    "ErrorRecord",
    "FileChange",
    "FileConversionPlan",
    "FileFilter",
    "PipelineState",
    "PotentialIssue",
    "ProcessedFile",
    "ProgressEmitter",
    "ProgressEvent",
    "RunConfiguration",
    "RunContext",
    "SkippedFile",
    "SourceFile",
    "SourceLocation",
    "TransformationStep",
    "ValidationIssue",
    "ValidationResult",
    "ValidationWarning",
    "WarningRecord",
    "build_run_options",
    "normalize_options",
    "run_conversion",
]
