"""Application use-case driving the analyze/validate/transform pipeline."""

from __future__ import annotations

import asyncio
import logging
import time
import traceback
from collections.abc import Iterable
from enum import StrEnum

from migration_converter.application.context import RunContext
from migration_converter.application.diagnostics import DiagnosticsAggregator
from migration_converter.application.file_filter import FileFilter
from migration_converter.application.options import (
    OptionsInput,
    RunConfiguration,
    normalize_options,
)
from migration_converter.application.plan import ValidationResult
from migration_converter.application.ports import MigrationStrategy, PatternMatcher
from migration_converter.application.progress import (
    ProgressCallback,
    ProgressEmitter,
    ProgressEvent,
)
from migration_converter.application.results import (
    ConversionResult,
    ConversionStats,
    ErrorRecord,
    WarningRecord,
)
from migration_converter.errors import CONVERSION_FAILED, ConversionError

logger = logging.getLogger(__name__)

# Yield once before analysis so every run measures a non-zero duration.
_WARMUP_DELAY_SECONDS = 0.001


class PipelineState(StrEnum):
    """Observable pipeline position of a ``Converter``."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    VALIDATING = "validating"
    TRANSFORMING = "transforming"
    ABORTED = "aborted"
    FINAL_VALIDATING = "final_validating"
    COMPLETE = "complete"
    FAILED = "failed"


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def _validation_code(kind: str) -> str:
    return f"VALIDATION_{kind.upper()}"


def validation_failure_result(
    validation: ValidationResult,
    diagnostics: DiagnosticsAggregator,
    duration: float,
) -> ConversionResult:
    """Build the failure result for a plan that did not validate."""
    errors = tuple(
        ErrorRecord(
            code=_validation_code(issue.type),
            message=issue.message,
            file=issue.file,
            line=issue.location.start_line if issue.location else None,
            column=issue.location.start_column if issue.location else None,
            recoverable=False,
        )
        for issue in validation.errors
    )
    warnings = diagnostics.warnings + tuple(
        WarningRecord(
            code=_validation_code(warning.type),
            message=warning.message,
            file=warning.file,
            line=warning.location.start_line if warning.location else None,
            suggestion=warning.suggestion,
        )
        for warning in validation.warnings
    )
    return ConversionResult(
        success=False,
        errors=errors,
        warnings=warnings,
        stats=diagnostics.create_empty_stats(),
        duration=duration,
    )


def exception_failure_result(
    exc: BaseException,
    diagnostics: DiagnosticsAggregator,
    duration: float,
) -> ConversionResult:
    """Build the failure result for an exception that escaped a phase."""
    located = exc if isinstance(exc, ConversionError) else None
    error = ErrorRecord(
        code=CONVERSION_FAILED,
        message=str(exc) or type(exc).__name__,
        file=located.file if located else None,
        line=located.line if located else None,
        column=located.column if located else None,
        stack="".join(traceback.format_exception(exc)),
        recoverable=False,
    )
    return ConversionResult(
        success=False,
        errors=(error,),
        warnings=diagnostics.warnings,
        stats=ConversionStats(),
        duration=duration,
    )


class Converter:
    """Run one migration strategy through the fixed three-phase pipeline.

    Parameters
    ----------
    strategy : MigrationStrategy
        Supplies ``analyze``, ``validate`` and ``transform``.
    options : RunConfiguration | ConversionOptions | Mapping[str, object]
        Run options; normalized on construction.
    matcher : PatternMatcher | None, default=None
        Glob engine for the file filter. Defaults to ``GlobMatcher``.
    progress : ProgressEmitter | None, default=None
        Listener registry shared across runs of this converter.

    Notes
    -----
    Each ``convert()`` call starts with a fresh ``DiagnosticsAggregator``,
    so errors and warnings never leak between runs. Concurrent ``convert()``
    calls on one instance are not supported.
    """

    def __init__(
        self,
        strategy: MigrationStrategy,
        options: OptionsInput,
        *,
        matcher: PatternMatcher | None = None,
        progress: ProgressEmitter | None = None,
    ) -> None:
        self.strategy = strategy
        self.options: RunConfiguration = normalize_options(options)
        self.file_filter = FileFilter.from_options(self.options, matcher=matcher)
        self.progress = progress or ProgressEmitter()
        self.diagnostics = DiagnosticsAggregator()
        self.state = PipelineState.IDLE

    def on_progress(self, listener: ProgressCallback) -> None:
        self.progress.on_progress(listener)

    def off_progress(self, listener: ProgressCallback) -> None:
        self.progress.off_progress(listener)

    def should_process_file(self, path: str) -> bool:
        return self.file_filter.should_process(path)

    def _new_context(self) -> RunContext:
        self.diagnostics = DiagnosticsAggregator()
        return RunContext(
            options=self.options,
            file_filter=self.file_filter,
            progress=self.progress,
            diagnostics=self.diagnostics,
        )

    async def convert(self) -> ConversionResult:
        """Analyze, validate and transform; never raises.

        Returns
        -------
        ConversionResult
            The transformer's result with ``duration`` set to the elapsed
            milliseconds, or a failure result when validation rejects the
            plan (outside dry-run) or any phase raises.
        """
        start = time.perf_counter()
        context = self._new_context()
        name = getattr(self.strategy, "name", type(self.strategy).__name__)

        try:
            self.state = PipelineState.ANALYZING
            context.report(
                ProgressEvent(
                    phase="analysis", progress=0, message="Starting conversion..."
                )
            )
            await asyncio.sleep(_WARMUP_DELAY_SECONDS)
            logger.info("analyzing %s with migration %s", self.options.source, name)
            plan = await self.strategy.analyze(context)

            self.state = PipelineState.VALIDATING
            validation = await self.strategy.validate(plan, context)
            if not validation.valid and not self.options.dry_run:
                self.state = PipelineState.ABORTED
                logger.warning(
                    "migration %s aborted: plan has %d validation error(s)",
                    name,
                    len(validation.errors),
                )
                return validation_failure_result(
                    validation, context.diagnostics, _elapsed_ms(start)
                )
            if not validation.valid:
                logger.info("dry run: continuing despite invalid plan")

            self.state = PipelineState.TRANSFORMING
            context.report(
                ProgressEvent(
                    phase="transformation",
                    progress=30,
                    message="Transforming files...",
                )
            )
            result = await self.strategy.transform(plan, context)

            self.state = PipelineState.FINAL_VALIDATING
            context.report(
                ProgressEvent(
                    phase="validation", progress=90, message="Validating results..."
                )
            )
            self.state = PipelineState.COMPLETE
            return result.with_duration(_elapsed_ms(start))
        except Exception as exc:
            self.state = PipelineState.FAILED
            logger.exception("migration %s failed", name)
            return exception_failure_result(
                exc, context.diagnostics, _elapsed_ms(start)
            )


async def run_conversion(
    *,
    strategy: MigrationStrategy,
    options: OptionsInput,
    listeners: Iterable[ProgressCallback] = (),
    matcher: PatternMatcher | None = None,
    isolate_listener_errors: bool = True,
) -> ConversionResult:
    """Use-case: run ``strategy`` once with the given options and listeners."""
    progress = ProgressEmitter(isolate_errors=isolate_listener_errors)
    for listener in listeners:
        progress.on_progress(listener)
    converter = Converter(strategy, options, matcher=matcher, progress=progress)
    return await converter.convert()
