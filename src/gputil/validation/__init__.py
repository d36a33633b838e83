"""
Validation and error handling for the gputil package.

This module provides the query error taxonomy, input validation, and the
shared helpers that log an error before it propagates.
"""

from .exceptions import (
    ContextCancelledError,
    ErrorSeverity,
    GpuQueryError,
    MalformedCsvError,
    ProcessExecutionError,
    SchemaMismatchError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_parse_error,
    handle_subprocess_error,
)

from .validators import (
    validate_device_selectors,
    validate_enum_choice,
    validate_executable_name,
    validate_positive_float,
)

__all__ = [
    # Errors
    "ContextCancelledError",
    "ErrorSeverity",
    "GpuQueryError",
    "MalformedCsvError",
    "ProcessExecutionError",
    "SchemaMismatchError",
    "ValidationError",
    # Handlers
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_parse_error",
    "handle_subprocess_error",
    # Validators
    "validate_device_selectors",
    "validate_enum_choice",
    "validate_executable_name",
    "validate_positive_float",
]
