"""Shared type aliases for migration pipeline modules."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Literal

type Phase = Literal["analysis", "planning", "transformation", "validation", "writing"]
type Complexity = Literal["low", "medium", "high"]
type Severity = Literal["low", "medium", "high"]
type ValidationErrorType = Literal["syntax", "semantic", "config", "compatibility"]
type ValidationWarningType = Literal[
    "deprecation", "bestPractice", "performance", "compatibility"
]
type ChangeType = Literal["add", "remove", "modify", "rename"]
type ConfigChangeType = Literal["create", "modify", "delete"]
type ConflictType = Literal["config", "naming", "dependency", "pattern"]
type ConfigFileType = Literal["babel", "eslint", "typescript", "jsconfig", "package"]
type MigrationModule = Literal[
    "cjs-to-esm", "js-to-ts", "wdio-to-playwright", "cucumber-to-playwright"
]
type LogLevel = Literal["error", "warn", "info", "debug", "verbose"]

type OptionScalar = str | int | float | bool | None | Path
type OptionValue = (
    OptionScalar
    | tuple["OptionValue", ...]
    | list["OptionValue"]
    | dict[str, "OptionValue"]
)
type OptionMap = Mapping[str, OptionValue]
type MutableOptionMap = dict[str, OptionValue]
