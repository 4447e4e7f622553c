"""Per-run state handed to migration strategies."""

from __future__ import annotations

from dataclasses import dataclass

from migration_converter.application.diagnostics import DiagnosticsAggregator
from migration_converter.application.file_filter import FileFilter
from migration_converter.application.options import RunConfiguration
from migration_converter.application.progress import ProgressEmitter, ProgressEvent


@dataclass
class RunContext:
    """Options, filter, progress channel and diagnostics for one run.

    Strategies use it to select files, report per-file progress and record
    errors or warnings. ``options.concurrency`` is a hint for the
    strategy's own fan-out; the pipeline does not enforce it.
    """

    options: RunConfiguration
    file_filter: FileFilter
    progress: ProgressEmitter
    diagnostics: DiagnosticsAggregator

    def should_process(self, path: str) -> bool:
        return self.file_filter.should_process(path)

    def report(self, event: ProgressEvent) -> None:
        self.progress.emit_progress(event)
