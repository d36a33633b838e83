"""
Public query API.

Both queries run the diagnostics tool once, decode its CSV output and map
each row onto a record. Errors from any stage propagate to the caller and no
records are returned.
"""

import logging
from typing import List, Optional, Tuple

from .config import get_config
from .models import DeviceRecord, ProcessRecord, QueryConfig
from .parsing import decode_rows, map_device_rows, map_process_rows
from .system.commands import QueryKind, run_query
from .system.context import QueryContext

logger = logging.getLogger(__name__)


def _resolve(
    context: Optional[QueryContext], config: Optional[QueryConfig]
) -> Tuple[QueryContext, QueryConfig]:
    config = config or get_config().query
    if context is None:
        if config.timeout_seconds is not None:
            context = QueryContext.with_timeout(config.timeout_seconds)
        else:
            context = QueryContext.background()
    return context, config


def list_devices(
    context: Optional[QueryContext] = None,
    *selectors: str,
    config: Optional[QueryConfig] = None,
) -> List[DeviceRecord]:
    """
    Return all GPUs, or the GPUs matching the given indexes/UUIDs.

    Args:
        context: Bounds the wait for the tool. None uses the configured
            timeout, or no deadline when none is configured.
        *selectors: Device indexes or UUIDs to filter on.
        config: Tool settings; defaults to the loaded configuration.

    Raises:
        ValidationError: If a selector is malformed.
        ContextCancelledError: If the context ends before the tool exits.
        ProcessExecutionError: If the tool cannot start or exits nonzero.
        MalformedCsvError: If the output is not well-formed CSV.
        SchemaMismatchError: If a row does not have the 13 device fields.
    """
    context, config = _resolve(context, config)
    raw = run_query(context, QueryKind.DEVICES, selectors, config)
    devices = map_device_rows(decode_rows(raw))
    logger.debug(f"Queried {len(devices)} devices")
    return devices


def list_processes(
    context: Optional[QueryContext] = None,
    *selectors: str,
    config: Optional[QueryConfig] = None,
) -> List[ProcessRecord]:
    """
    Return the processes holding a compute context on the selected GPUs.

    An empty list means no compute processes are running.

    Raises:
        Same as list_devices, with SchemaMismatchError raised for rows that
        do not have the 6 process fields.
    """
    context, config = _resolve(context, config)
    raw = run_query(context, QueryKind.PROCESSES, selectors, config)
    processes = map_process_rows(decode_rows(raw))
    logger.debug(f"Queried {len(processes)} compute processes")
    return processes
