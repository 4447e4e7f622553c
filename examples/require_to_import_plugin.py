#!/usr/bin/env python3
"""Example plugin migrating CommonJS ``require`` calls to ES module imports."""

from __future__ import annotations

import re
from pathlib import Path

from migration_converter.application.context import RunContext
from migration_converter.application.plan import (
    ConversionPlan,
    FileConversionPlan,
    SourceFile,
    TransformationStep,
    ValidationResult,
)
from migration_converter.application.results import (
    ConversionResult,
    ConversionStats,
    FileChange,
    ProcessedFile,
    SkippedFile,
)
from migration_converter.migrations import MigrationRegistry
from migration_converter.migrations.builtins import InventoryMigration, dependency_issues

REQUIRE_PATTERN = re.compile(
    r"^(?P<indent>\s*)(?:const|let|var)\s+(?P<name>[\w$]+)\s*=\s*"
    r"require\((?P<quote>['\"])(?P<module>[^'\"]+)(?P=quote)\);?\s*$"
)


class RequireToImportMigration:
    """Rewrite ``const x = require('y')`` lines into ``import x from 'y'``."""

    name = "cjs-to-esm"

    async def analyze(self, context: RunContext) -> ConversionPlan:
        """Reuse the inventory scan and plan one step per file with requires."""
        inventory = await InventoryMigration().analyze(context)
        files = tuple(
            FileConversionPlan(
                source=item.source,
                target_path=item.target_path,
                transformations=(
                    TransformationStep(
                        type="require-to-import",
                        description="Convert require() declarations to imports",
                        priority=1,
                    ),
                ),
            )
            for item in inventory.files
            if "require(" in item.source.content
        )
        return ConversionPlan(files=files, estimated_duration=inventory.estimated_duration)

    async def validate(
        self, plan: ConversionPlan, context: RunContext
    ) -> ValidationResult:
        errors = dependency_issues(plan)
        return ValidationResult(valid=not errors, errors=tuple(errors))

    async def transform(
        self, plan: ConversionPlan, context: RunContext
    ) -> ConversionResult:
        processed: list[ProcessedFile] = []
        skipped: list[SkippedFile] = []
        for file_plan in plan.files:
            lines = file_plan.source.content.splitlines(keepends=True)
            changes: list[FileChange] = []
            for number, line in enumerate(lines, start=1):
                match = REQUIRE_PATTERN.match(line)
                if match is None:
                    continue
                rewritten = (
                    f"{match['indent']}import {match['name']} from "
                    f"{match['quote']}{match['module']}{match['quote']};\n"
                )
                changes.append(
                    FileChange(
                        type="modify",
                        description="require() to import",
                        line=number,
                        before=line.rstrip("\n"),
                        after=rewritten.rstrip("\n"),
                    )
                )
                lines[number - 1] = rewritten
            if not changes:
                skipped.append(
                    SkippedFile(file=file_plan.source, reason="no require() declarations")
                )
                continue
            content = "".join(lines)
            if not context.options.dry_run:
                target = Path(file_plan.target_path)
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
            processed.append(
                ProcessedFile(
                    source=file_plan.source,
                    target=SourceFile.from_text(
                        file_plan.target_path,
                        content,
                        relative_path=file_plan.source.relative_path,
                    ),
                    changes=tuple(changes),
                    modified=True,
                )
            )
        diagnostics = context.diagnostics
        return ConversionResult(
            success=True,
            processed_files=tuple(processed),
            skipped_files=tuple(skipped),
            warnings=diagnostics.warnings,
            stats=ConversionStats(
                total_files=len(plan.files),
                processed_files=len(processed),
                skipped_files=len(skipped),
                total_changes=sum(len(item.changes) for item in processed),
                total_errors=len(diagnostics.errors),
                total_warnings=len(diagnostics.warnings),
            ),
        )


def register_migrations(registry: MigrationRegistry) -> None:
    """Registry hook used by ``migrate-tests convert --plugin-module``."""
    registry.register(RequireToImportMigration())
