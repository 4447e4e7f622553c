"""Error taxonomy for migration runs.

Every error raised by the pipeline or by a migration strategy is a
``ConversionError``. Its ``kind`` selects the code namespace, so a
``ParsingError("...", "SYNTAX_ERROR")`` carries the code
``PARSING_SYNTAX_ERROR``. Exceptions that are not ``ConversionError`` and
escape a pipeline phase are reported under ``CONVERSION_FAILED``.
"""

from __future__ import annotations

from enum import StrEnum

CONVERSION_FAILED = "CONVERSION_FAILED"


class ErrorKind(StrEnum):
    """Error namespaces and their code prefixes."""

    GENERIC = ""
    VALIDATION = "VALIDATION_"
    PARSING = "PARSING_"
    TRANSFORMATION = "TRANSFORMATION_"
    CONFIGURATION = "CONFIG_"
    FILESYSTEM = "FS_"


def error_code(kind: ErrorKind, sub_code: str) -> str:
    """Return ``sub_code`` namespaced by the prefix of ``kind``."""
    return f"{kind.value}{sub_code}"


class ConversionError(Exception):
    """Base error for migration failures.

    Parameters
    ----------
    message : str
        Human readable description.
    code : str, default="UNKNOWN"
        Caller-supplied sub-code. The class ``kind`` prefix is prepended.
    file : str | None, default=None
        File the error relates to.
    line, column : int | None, default=None
        Source location inside ``file``.
    recoverable : bool, default=False
        Whether the run may continue past this error.
    """

    kind: ErrorKind = ErrorKind.GENERIC
    exit_code: int = 1

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN",
        *,
        file: str | None = None,
        line: int | None = None,
        column: int | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = error_code(self.kind, code)
        self.file = file
        self.line = line
        self.column = column
        self.recoverable = recoverable


class ValidationError(ConversionError):
    """Plan or source failed validation."""

    kind = ErrorKind.VALIDATION


class ParsingError(ConversionError):
    """Source could not be parsed."""

    kind = ErrorKind.PARSING


class TransformationError(ConversionError):
    """A transformation step could not be applied."""

    kind = ErrorKind.TRANSFORMATION


class ConfigurationError(ConversionError):
    """Run options or project configuration are invalid."""

    kind = ErrorKind.CONFIGURATION
    exit_code = 2


class FileSystemError(ConversionError):
    """Reading, writing or backing up a file failed."""

    kind = ErrorKind.FILESYSTEM


class PluginError(ConfigurationError):
    """Migration registration or plugin module loading failed."""

    def __init__(self, message: str, code: str = "PLUGIN") -> None:
        super().__init__(message, code)


def is_conversion_error(error: object) -> bool:
    """Return ``True`` for any ``ConversionError``."""
    return isinstance(error, ConversionError)


def is_validation_error(error: object) -> bool:
    """Return ``True`` for ``ValidationError`` instances."""
    return isinstance(error, ValidationError)


def is_parsing_error(error: object) -> bool:
    """Return ``True`` for ``ParsingError`` instances."""
    return isinstance(error, ParsingError)
