"""Error and warning aggregation for a single migration run."""

from __future__ import annotations

import dataclasses
import traceback
from collections import Counter
from collections.abc import Mapping

from migration_converter.application.results import (
    ConversionStats,
    ErrorRecord,
    WarningRecord,
)
from migration_converter.errors import ConversionError, ErrorKind

type ErrorInput = ErrorRecord | Mapping[str, object]
type WarningInput = WarningRecord | Mapping[str, object]

_NAMESPACES = tuple(kind for kind in ErrorKind if kind.value)


def _namespace(code: str) -> str:
    for kind in _NAMESPACES:
        if code.startswith(kind.value):
            return kind.name.lower()
    return ErrorKind.GENERIC.name.lower()


class DiagnosticsAggregator:
    """Append-only error and warning store.

    ``add_error`` never marks an error recoverable. Errors that should keep a
    ``recoverable=True`` flag are recorded from the raised exception with
    ``record_exception``.
    """

    def __init__(self) -> None:
        self._errors: list[ErrorRecord] = []
        self._warnings: list[WarningRecord] = []

    @property
    def errors(self) -> tuple[ErrorRecord, ...]:
        return tuple(self._errors)

    @property
    def warnings(self) -> tuple[WarningRecord, ...]:
        return tuple(self._warnings)

    def add_error(self, error: ErrorInput) -> ErrorRecord:
        """Store ``error`` with ``recoverable`` forced to ``False``."""
        if isinstance(error, ErrorRecord):
            record = dataclasses.replace(error, recoverable=False)
        else:
            fields = {key: value for key, value in error.items() if key != "recoverable"}
            record = ErrorRecord(**fields)  # type: ignore[arg-type]
        self._errors.append(record)
        return record

    def record_exception(self, exc: ConversionError) -> ErrorRecord:
        """Store a raised ``ConversionError`` keeping its recoverable flag."""
        record = ErrorRecord(
            code=exc.code,
            message=exc.message,
            file=exc.file,
            line=exc.line,
            column=exc.column,
            stack="".join(traceback.format_exception(exc)) if exc.__traceback__ else None,
            recoverable=exc.recoverable,
        )
        self._errors.append(record)
        return record

    def add_warning(self, warning: WarningInput) -> WarningRecord:
        """Store ``warning`` as given."""
        record = (
            warning
            if isinstance(warning, WarningRecord)
            else WarningRecord(**warning)  # type: ignore[arg-type]
        )
        self._warnings.append(record)
        return record

    def create_empty_stats(self) -> ConversionStats:
        """Return zeroed file counters with the current error/warning totals."""
        return ConversionStats(
            total_errors=len(self._errors),
            total_warnings=len(self._warnings),
        )

    def summary(self) -> dict[str, dict[str, int]]:
        """Count errors and warnings per code namespace."""
        return {
            "errors": dict(Counter(_namespace(item.code) for item in self._errors)),
            "warnings": dict(Counter(_namespace(item.code) for item in self._warnings)),
        }

    def has_errors(self) -> bool:
        return bool(self._errors)
