"""
System interaction for GPU queries.

This module provides:

- Argument construction and execution of the diagnostics tool
- Cancellable query contexts with optional deadlines
- Termination of spawned process trees on cancellation
"""

from .commands import (
    DEFAULT_BINARY,
    QUERY_FORMAT,
    QueryKind,
    build_query_args,
    check_nvidia_smi_installed,
    run_command,
    run_query,
)
from .context import CANCELED, DEADLINE_EXCEEDED, QueryContext
from .processes import terminate_process_tree

__all__ = [
    # Commands
    "DEFAULT_BINARY",
    "QUERY_FORMAT",
    "QueryKind",
    "build_query_args",
    "check_nvidia_smi_installed",
    "run_command",
    "run_query",
    # Contexts
    "CANCELED",
    "DEADLINE_EXCEEDED",
    "QueryContext",
    # Processes
    "terminate_process_tree",
]
