"""
Exception types and error handling helpers.

This module defines the error taxonomy raised by GPU queries together with
the logging helpers used to report an error before it propagates.
"""

import logging
import sys
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class ValidationError(Exception):
    """
    Exception raised when validation of an input or configuration value fails.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class GpuQueryError(Exception):
    """Base class for every failure of a GPU query."""


class ProcessExecutionError(GpuQueryError):
    """
    The diagnostics tool could not be started or exited with a nonzero status.

    Attributes:
        command: The full argument list that was executed.
        exit_code: The tool's exit status, or None when it never started.
        stderr: Diagnostic text written by the tool (or the start failure).
    """

    def __init__(self, command: Sequence[str], exit_code: Optional[int], stderr: str = ""):
        self.command: List[str] = list(command)
        self.exit_code = exit_code
        self.stderr = stderr.strip()
        if exit_code is None:
            message = f"failed to run '{self.command[0]}'"
        else:
            message = f"'{self.command[0]}' exited with status {exit_code}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class ContextCancelledError(GpuQueryError):
    """
    The query context ended before the diagnostics tool finished.

    Attributes:
        reason: "context canceled" or "context deadline exceeded".
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class MalformedCsvError(GpuQueryError):
    """The tool output is not well-formed CSV."""

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class SchemaMismatchError(GpuQueryError):
    """A decoded row does not have the field count its record type requires."""

    def __init__(self, record_type: str, expected: int, actual: int, row_index: int):
        super().__init__(
            f"row {row_index}: {record_type} requires {expected} fields, got {actual}"
        )
        self.record_type = record_type
        self.expected = expected
        self.actual = actual
        self.row_index = row_index


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log an error at the given severity, then re-raise it unless told not to.

    Debug and critical entries carry the traceback.

    Args:
        error: The exception being reported
        context: Where it happened, e.g. "parsing tool output"
        severity: ErrorSeverity member or its lowercase name
        reraise: Raise `error` after logging
        logger: Caller's logger (defaults to this module's logger)
    """
    log = logger or globals()['logger']
    severity = ErrorSeverity(severity.lower()) if isinstance(severity, str) else severity

    log.log(
        _LOG_LEVELS[severity],
        f"Error in {context}: {error}",
        exc_info=severity in (ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL),
    )

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: Sequence[str], **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{' '.join(command)}'", **kwargs)


def handle_parse_error(error: Exception, context: str, **kwargs) -> None:
    """Handle errors raised while decoding tool output."""
    handle_error(error, f"parsing {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a CLI-level error and exit the interpreter."""
    exit_code = kwargs.pop('exit_code', 1)
    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)
    sys.exit(exit_code)
