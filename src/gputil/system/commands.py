"""
Invocation of the `nvidia-smi` diagnostics tool.

This module builds the tool's argument list for a query kind, runs it bound
to a QueryContext, and returns the raw CSV bytes written to stdout.
"""

import logging
import os
import shutil
import signal
import subprocess
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from ..models.config import QueryConfig
from ..validation import (
    ContextCancelledError,
    ErrorSeverity,
    ProcessExecutionError,
    handle_subprocess_error,
    validate_device_selectors,
)
from .context import QueryContext
from .processes import terminate_process_tree

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "nvidia-smi"

# CSV, no header row, no unit suffixes ("MiB", "W", "%").
QUERY_FORMAT = "--format=csv,noheader,nounits"


class QueryKind(Enum):
    """
    The fixed field sets that can be requested from the tool.

    The value is the selector argument; its column order is the field order
    of the matching record type.
    """

    DEVICES = (
        "--query-gpu=index,uuid,utilization.gpu,memory.total,memory.used,"
        "memory.free,driver_version,name,gpu_serial,power.draw,power.limit,"
        "temperature.gpu,timestamp"
    )
    PROCESSES = "--query-compute-apps=timestamp,gpu_name,gpu_uuid,pid,name,used_memory"


def build_query_args(query_kind: QueryKind, selectors: Iterable[str] = ()) -> List[str]:
    """
    Build the tool arguments for a query.

    Args:
        query_kind: Which field set to request.
        selectors: Device indexes or UUIDs. When given they are joined with
            commas into a single `-i` filter.

    Returns:
        The argument list, without the executable.

    Raises:
        ValidationError: If a selector is empty or contains commas or whitespace.

    Examples:
        >>> build_query_args(QueryKind.PROCESSES, ["0", "1"])[-2:]
        ['-i', '0,1']
    """
    args = [query_kind.value, QUERY_FORMAT]
    selector_list = validate_device_selectors(selectors)
    if selector_list:
        args.extend(["-i", ",".join(selector_list)])
    return args


def _kill_process_group(pgid: int) -> None:
    """Kill what is left of the tool's session, including re-parented descendants."""
    if not hasattr(os, "killpg"):
        return
    try:
        os.killpg(pgid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug(f"Process group {pgid} already gone")
    except PermissionError:
        logger.warning(f"Access denied killing process group {pgid}")


def _kill_and_reap(process: subprocess.Popen, config: QueryConfig) -> None:
    """Kill a running tool process and its descendants, then reap it."""
    timeout = config.termination_timeout_seconds
    terminate_process_tree(process.pid, "diagnostics process", timeout=timeout)
    # The tool leads its own session, so its pid is the group id.
    _kill_process_group(process.pid)
    try:
        process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        # Something outside the group still holds the pipes open
        logger.warning(
            f"Output pipes of PID {process.pid} still open after {timeout}s, closing them"
        )
        for pipe in (process.stdout, process.stderr):
            if pipe is not None:
                pipe.close()
        try:
            process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.error(f"PID {process.pid} did not exit after SIGKILL")


def run_command(
    context: QueryContext, command: Sequence[str], config: Optional[QueryConfig] = None
) -> bytes:
    """
    Run a command to completion bound to a context and return its stdout.

    The wait is sliced into `poll_interval_seconds` chunks of
    `Popen.communicate`, which keeps draining the pipes, and the context is
    checked between slices. The command leads a new session so that a
    cancelled run can be killed as a process group.

    Raises:
        ContextCancelledError: If the context is done before the command
            starts or ends before it exits. A started process is killed.
        ProcessExecutionError: If the command cannot be started or exits
            with a nonzero status.
    """
    config = config or QueryConfig()
    command = list(command)

    reason = context.err()
    if reason is not None:
        raise ContextCancelledError(reason)

    logger.debug(f"Executing command: '{' '.join(command)}'")
    try:
        process = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        # Missing binary or no execute permission
        error = ProcessExecutionError(command, None, f"{type(e).__name__}: {e}")
        handle_subprocess_error(
            error, command, severity=ErrorSeverity.ERROR, reraise=False, logger=logger
        )
        raise error from e

    while True:
        reason = context.err()
        if reason is not None:
            logger.warning(f"{reason}; killing '{command[0]}' (PID: {process.pid})")
            _kill_and_reap(process, config)
            raise ContextCancelledError(reason)

        wait_slice = config.poll_interval_seconds
        remaining = context.remaining()
        if remaining is not None:
            wait_slice = min(wait_slice, remaining)
        try:
            stdout, stderr = process.communicate(timeout=wait_slice)
            break
        except subprocess.TimeoutExpired:
            continue

    if process.returncode != 0:
        handle_subprocess_error(
            ProcessExecutionError(
                command, process.returncode, stderr.decode("utf-8", errors="replace")
            ),
            command,
            severity=ErrorSeverity.ERROR,
            logger=logger,
        )

    logger.debug(f"'{command[0]}' exited with status 0, {len(stdout)} bytes of output")
    return stdout


def run_query(
    context: QueryContext,
    query_kind: QueryKind,
    selectors: Iterable[str] = (),
    config: Optional[QueryConfig] = None,
) -> bytes:
    """
    Run one query against the diagnostics tool.

    Args:
        context: Bounds how long the caller waits for the tool.
        query_kind: Which field set to request.
        selectors: Optional device indexes or UUIDs to filter on.
        config: Tool settings; defaults to QueryConfig().

    Returns:
        The raw CSV bytes the tool wrote to stdout.

    Raises:
        ValidationError: If a selector is malformed.
        ContextCancelledError: If the context ends before the tool exits.
        ProcessExecutionError: If the tool cannot start or exits nonzero.
    """
    config = config or QueryConfig()
    args = build_query_args(query_kind, selectors)
    return run_command(context, [config.binary, *args], config)


def check_nvidia_smi_installed(binary: str = DEFAULT_BINARY) -> bool:
    """
    Check if the diagnostics tool is available on the system.

    Returns:
        True if `binary` resolves on PATH (or is an executable path).
    """
    return shutil.which(binary) is not None
