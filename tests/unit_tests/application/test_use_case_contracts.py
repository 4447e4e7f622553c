"""Unit tests for the analyze/validate/transform pipeline contract."""

from __future__ import annotations

import json

import pytest

from migration_converter.application.context import RunContext
from migration_converter.application.plan import (
    ConversionPlan,
    SourceLocation,
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
)
from migration_converter.application.progress import ProgressEmitter, ProgressEvent
from migration_converter.application.results import ConversionResult, ConversionStats
from migration_converter.application.use_cases import (
    Converter,
    PipelineState,
    run_conversion,
)
from migration_converter.errors import TransformationError


class _Strategy:
    """Strategy double recording phase calls."""

    name = "stub"

    def __init__(
        self,
        validation: ValidationResult | None = None,
        analyze_error: Exception | None = None,
        transform_error: Exception | None = None,
    ) -> None:
        self.validation = validation or ValidationResult(valid=True)
        self.analyze_error = analyze_error
        self.transform_error = transform_error
        self.calls: list[str] = []
        self.contexts: list[RunContext] = []

    async def analyze(self, context: RunContext) -> ConversionPlan:
        self.calls.append("analyze")
        self.contexts.append(context)
        if self.analyze_error is not None:
            raise self.analyze_error
        return ConversionPlan(estimated_duration=1000, required_disk_space=1024)

    async def validate(
        self, plan: ConversionPlan, context: RunContext
    ) -> ValidationResult:
        self.calls.append("validate")
        assert plan.required_disk_space == 1024
        return self.validation

    async def transform(
        self, plan: ConversionPlan, context: RunContext
    ) -> ConversionResult:
        self.calls.append("transform")
        if self.transform_error is not None:
            raise self.transform_error
        diagnostics = context.diagnostics
        return ConversionResult(
            success=True,
            errors=diagnostics.errors,
            warnings=diagnostics.warnings,
            stats=diagnostics.create_empty_stats(),
            duration=0,
        )


_SYNTAX_FAILURE = ValidationResult(
    valid=False,
    errors=(ValidationIssue(type="syntax", message="Invalid syntax", file="test.js"),),
)


@pytest.mark.asyncio
async def test_successful_run_calls_phases_in_order() -> None:
    """Run analyze, validate and transform once each and return the result."""
    strategy = _Strategy()
    converter = Converter(strategy, {"source": "/test/source", "target": "/t"})

    result = await converter.convert()

    assert strategy.calls == ["analyze", "validate", "transform"]
    assert result.success is True
    assert result.processed_files == ()
    assert result.errors == ()
    assert result.duration > 0
    assert converter.state is PipelineState.COMPLETE


@pytest.mark.asyncio
async def test_progress_checkpoints_are_emitted() -> None:
    """Emit the 0/30/90 checkpoints in phase order."""
    converter = Converter(_Strategy(), {"source": "/s"})
    events: list[ProgressEvent] = []
    converter.on_progress(events.append)

    await converter.convert()

    assert [(event.phase, event.progress) for event in events] == [
        ("analysis", 0),
        ("transformation", 30),
        ("validation", 90),
    ]
    assert events[0].message == "Starting conversion..."


@pytest.mark.asyncio
async def test_validation_failure_short_circuits() -> None:
    """Return a VALIDATION_ failure without transforming when not dry-run."""
    strategy = _Strategy(validation=_SYNTAX_FAILURE)
    converter = Converter(strategy, {"source": "/s"})
    events: list[ProgressEvent] = []
    converter.on_progress(events.append)

    result = await converter.convert()

    assert strategy.calls == ["analyze", "validate"]
    assert result.success is False
    assert len(result.errors) == 1
    assert result.errors[0].code == "VALIDATION_SYNTAX"
    assert result.errors[0].message == "Invalid syntax"
    assert result.errors[0].file == "test.js"
    assert result.errors[0].recoverable is False
    assert result.stats == ConversionStats()
    assert result.duration > 0
    assert [event.phase for event in events] == ["analysis"]
    assert converter.state is PipelineState.ABORTED


@pytest.mark.asyncio
async def test_validation_failure_maps_locations_and_warnings() -> None:
    """Carry locations, suggestions and earlier warnings into the failure."""
    validation = ValidationResult(
        valid=False,
        errors=(
            ValidationIssue(
                type="compatibility",
                message="Unsupported hook",
                file="a.js",
                location=SourceLocation(start_line=3, start_column=7),
            ),
        ),
        warnings=(
            ValidationWarning(
                type="bestPractice",
                message="Prefer locators",
                file="b.js",
                location=SourceLocation(start_line=9, start_column=1),
                suggestion="Use page.locator()",
            ),
        ),
    )

    class _WarningStrategy(_Strategy):
        async def analyze(self, context: RunContext) -> ConversionPlan:
            context.diagnostics.add_warning({"code": "ANALYZE_NOTE", "message": "n"})
            context.diagnostics.add_error({"code": "ANALYZE_ERR", "message": "e"})
            return await super().analyze(context)

    result = await Converter(
        _WarningStrategy(validation=validation), {"source": "/s"}
    ).convert()

    error = result.errors[0]
    assert (error.code, error.line, error.column) == ("VALIDATION_COMPATIBILITY", 3, 7)
    assert [warning.code for warning in result.warnings] == [
        "ANALYZE_NOTE",
        "VALIDATION_BESTPRACTICE",
    ]
    assert result.warnings[1].line == 9
    assert result.warnings[1].suggestion == "Use page.locator()"
    assert result.stats == ConversionStats(total_errors=1, total_warnings=1)


@pytest.mark.asyncio
async def test_dry_run_continues_past_invalid_plan() -> None:
    """Transform anyway when validation fails in dry-run mode."""
    strategy = _Strategy(validation=_SYNTAX_FAILURE)
    result = await Converter(strategy, {"source": "/s", "dryRun": True}).convert()

    assert strategy.calls == ["analyze", "validate", "transform"]
    assert result.success is True


@pytest.mark.asyncio
async def test_transform_exception_becomes_conversion_failed() -> None:
    """Report an escaping exception as a single CONVERSION_FAILED error."""
    strategy = _Strategy(transform_error=RuntimeError("Transformation failed"))
    converter = Converter(strategy, {"source": "/s"})

    result = await converter.convert()

    assert result.success is False
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.code == "CONVERSION_FAILED"
    assert error.message == "Transformation failed"
    assert error.recoverable is False
    assert error.stack is not None and "RuntimeError" in error.stack
    assert result.processed_files == ()
    assert result.skipped_files == ()
    assert result.stats == ConversionStats()
    assert result.duration > 0
    assert converter.state is PipelineState.FAILED


@pytest.mark.asyncio
async def test_analyze_exception_keeps_warnings_and_location() -> None:
    """Preserve aggregator warnings and ConversionError locations on failure."""

    class _FailingAnalyze(_Strategy):
        async def analyze(self, context: RunContext) -> ConversionPlan:
            context.diagnostics.add_warning({"code": "W", "message": "kept"})
            raise TransformationError(
                "bad hook", "UNSUPPORTED", file="x.js", line=2, recoverable=True
            )

    strategy = _FailingAnalyze()
    result = await Converter(strategy, {"source": "/s"}).convert()

    assert strategy.calls == []
    assert [warning.message for warning in result.warnings] == ["kept"]
    error = result.errors[0]
    assert error.code == "CONVERSION_FAILED"
    assert (error.file, error.line, error.recoverable) == ("x.js", 2, False)


@pytest.mark.asyncio
async def test_each_run_starts_with_fresh_diagnostics() -> None:
    """Do not leak errors or warnings from one run into the next."""

    class _Noisy(_Strategy):
        async def analyze(self, context: RunContext) -> ConversionPlan:
            context.diagnostics.add_warning({"code": "W", "message": "once per run"})
            return await super().analyze(context)

    converter = Converter(_Noisy(), {"source": "/s"})
    first = await converter.convert()
    second = await converter.convert()

    assert len(first.warnings) == 1
    assert len(second.warnings) == 1


@pytest.mark.asyncio
async def test_context_exposes_options_and_filter() -> None:
    """Hand strategies the normalized options and the configured filter."""
    strategy = _Strategy()
    converter = Converter(strategy, {"source": "/s", "concurrency": 3})

    await converter.convert()

    context = strategy.contexts[0]
    assert context.options.concurrency == 3
    assert context.should_process("src/a.js") is True
    assert context.should_process("node_modules/a.js") is False
    assert converter.should_process_file("node_modules/a.js") is False


@pytest.mark.asyncio
async def test_non_isolated_listener_failure_is_reported() -> None:
    """Turn a propagating listener failure into CONVERSION_FAILED."""

    def broken(event: ProgressEvent) -> None:
        raise ValueError("listener exploded")

    strategy = _Strategy()
    result = await run_conversion(
        strategy=strategy,
        options={"source": "/s"},
        listeners=[broken],
        isolate_listener_errors=False,
    )

    assert strategy.calls == []
    assert result.errors[0].code == "CONVERSION_FAILED"
    assert result.errors[0].message == "listener exploded"
    assert result.duration > 0


@pytest.mark.asyncio
async def test_isolated_listener_failure_does_not_abort_run() -> None:
    """Complete the run when a listener fails and isolation is on."""

    def broken(event: ProgressEvent) -> None:
        raise ValueError("listener exploded")

    result = await run_conversion(
        strategy=_Strategy(), options={"source": "/s"}, listeners=[broken]
    )
    assert result.success is True


@pytest.mark.asyncio
async def test_shared_emitter_and_removed_listener() -> None:
    """Use a caller-supplied emitter and honour ``off_progress``."""
    emitter = ProgressEmitter()
    converter = Converter(_Strategy(), {"source": "/s"}, progress=emitter)
    events: list[ProgressEvent] = []
    converter.on_progress(events.append)
    converter.off_progress(events.append)

    await converter.convert()

    assert converter.progress is emitter
    assert events == []


@pytest.mark.asyncio
async def test_failure_result_is_json_serializable() -> None:
    """Serialize a failure result for external reporting."""
    result = await Converter(
        _Strategy(validation=_SYNTAX_FAILURE), {"source": "/s"}
    ).convert()

    payload = json.loads(json.dumps(result.to_dict()))
    assert payload["success"] is False
    assert payload["errors"][0]["code"] == "VALIDATION_SYNTAX"
    assert payload["stats"]["totalErrors"] == 0
