"""Built-in migrations."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path

from migration_converter.application.context import RunContext
from migration_converter.application.plan import (
    ConversionPlan,
    FileConversionPlan,
    SourceFile,
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
)
from migration_converter.application.progress import ProgressEvent
from migration_converter.application.results import (
    ConversionResult,
    ConversionStats,
    SkippedFile,
    WarningRecord,
)
from migration_converter.errors import FileSystemError

logger = logging.getLogger(__name__)

NO_TRANSFORMATIONS = "no transformations registered"
# Rough per-file cost used for the plan estimate, in milliseconds.
_ESTIMATED_MS_PER_FILE = 10.0


def dependency_issues(plan: ConversionPlan) -> list[ValidationIssue]:
    """Report transformation steps that depend on unknown step names."""
    return [
        ValidationIssue(
            type="semantic",
            message=(
                f"Transformation '{step}' depends on unknown transformation "
                f"'{dependency}'."
            ),
            file=file_plan.source.relative_path,
        )
        for file_plan in plan.files
        for step, dependency in file_plan.dangling_dependencies()
    ]


def _read_source(path: Path, relative_path: str) -> SourceFile:
    stat = path.stat()
    return SourceFile(
        path=str(path),
        content=path.read_text(encoding="utf-8", errors="replace"),
        extension=path.suffix,
        relative_path=relative_path,
        size=stat.st_size,
        last_modified=datetime.fromtimestamp(stat.st_mtime),
    )


class InventoryMigration:
    """Plan every in-scope file without changing anything.

    Useful to preview which files a real migration would see under the
    configured include/exclude patterns. Every planned file is reported as
    skipped.
    """

    name = "inventory"

    def _candidates(self, root: Path) -> list[tuple[Path, str]]:
        if root.is_file():
            return [(root, root.name)]
        return [
            (path, path.relative_to(root).as_posix())
            for path in sorted(root.rglob("*"))
            if path.is_file()
        ]

    async def analyze(self, context: RunContext) -> ConversionPlan:
        """Read in-scope files under ``options.source`` into a plan.

        Raises
        ------
        FileSystemError
            If the source path does not exist.
        """
        options = context.options
        root = Path(options.source)
        if not root.exists():
            raise FileSystemError(
                f"Source path does not exist: {root}", "NOT_FOUND", file=str(root)
            )

        selected = [
            (path, relative)
            for path, relative in self._candidates(root)
            if context.should_process(relative)
        ]
        limit = asyncio.Semaphore(options.concurrency)

        async def read(path: Path, relative: str) -> SourceFile | None:
            async with limit:
                try:
                    return await asyncio.to_thread(_read_source, path, relative)
                except OSError as exc:
                    context.diagnostics.add_error(
                        {
                            "code": "FS_READ_FAILED",
                            "message": str(exc),
                            "file": relative,
                        }
                    )
                    return None

        sources = await asyncio.gather(*(read(path, rel) for path, rel in selected))
        target_root = Path(options.target) if options.target else None
        files = tuple(
            FileConversionPlan(
                source=source,
                target_path=(
                    str(target_root / source.relative_path)
                    if target_root is not None
                    else source.path
                ),
            )
            for source in sources
            if source is not None
        )
        logger.debug("inventory planned %d of %d file(s)", len(files), len(selected))
        context.report(
            ProgressEvent(
                phase="planning",
                progress=20,
                message=f"Planned {len(files)} file(s)",
            )
        )
        copies_files = target_root is not None and not options.dry_run
        return ConversionPlan(
            files=files,
            estimated_duration=len(files) * _ESTIMATED_MS_PER_FILE,
            required_disk_space=(
                sum(item.source.size for item in files) if copies_files else 0
            ),
        )

    async def validate(
        self, plan: ConversionPlan, context: RunContext
    ) -> ValidationResult:
        """Reject dangling step dependencies; warn when nothing matched."""
        errors = dependency_issues(plan)
        warnings: list[ValidationWarning] = []
        if not plan.files:
            warnings.append(
                ValidationWarning(
                    type="performance",
                    message="No files matched the include/exclude patterns.",
                    suggestion="Check the --include and --exclude patterns.",
                )
            )
        if not errors:
            # The pipeline maps validation warnings only for rejected plans.
            for warning in warnings:
                context.diagnostics.add_warning(
                    WarningRecord(
                        code=f"VALIDATION_{warning.type.upper()}",
                        message=warning.message,
                        suggestion=warning.suggestion,
                    )
                )
        return ValidationResult(
            valid=not errors, errors=tuple(errors), warnings=tuple(warnings)
        )

    async def transform(
        self, plan: ConversionPlan, context: RunContext
    ) -> ConversionResult:
        """Report every planned file as skipped."""
        total = len(plan.files)
        skipped: list[SkippedFile] = []
        for index, file_plan in enumerate(plan.files, start=1):
            skipped.append(SkippedFile(file=file_plan.source, reason=NO_TRANSFORMATIONS))
            context.report(
                ProgressEvent(
                    phase="transformation",
                    progress=30 + 60 * index / total,
                    message=f"Skipped {file_plan.source.relative_path}",
                    current_file=file_plan.source.relative_path,
                    operation="skip",
                )
            )
        diagnostics = context.diagnostics
        unreadable = len(diagnostics.errors)
        return ConversionResult(
            success=not diagnostics.has_errors(),
            skipped_files=tuple(skipped),
            errors=diagnostics.errors,
            warnings=diagnostics.warnings,
            stats=ConversionStats(
                total_files=total + unreadable,
                skipped_files=total,
                error_files=unreadable,
                total_errors=len(diagnostics.errors),
                total_warnings=len(diagnostics.warnings),
            ),
        )
