"""
gputil: typed GPU device and compute-process queries over nvidia-smi.

The package runs `nvidia-smi` in CSV mode, decodes its output and maps each
row onto a record. It is organized into:
- gpu: the public queries (list_devices, list_processes)
- system: tool invocation, cancellable contexts, process termination
- parsing: CSV decoding and positional record mapping
- models: record and configuration data structures
- validation: error taxonomy, validators and error handling helpers
- config: TOML configuration loading
- cli: command-line front end

Usage:
    From command line:
        gputil devices -i 0 -i 1
        gputil processes --json

    Programmatically:
        from gputil import QueryContext, list_devices
        for device in list_devices(QueryContext.with_timeout(5.0)):
            print(device)
"""

# Main interfaces
from .gpu import list_devices, list_processes
from .config import get_config, clear_config_cache, set_config_path
from .cli import main_cli

# Model classes for external use
from .models import (
    AppConfig,
    DeviceRecord,
    LoggingConfig,
    ProcessRecord,
    QueryConfig,
    RawRow,
)

# Parsing
from .parsing import decode_rows, iter_rows, map_device_rows, map_process_rows

# System utilities
from .system import (
    QueryContext,
    QueryKind,
    build_query_args,
    check_nvidia_smi_installed,
    run_query,
)

# Errors
from .validation import (
    ContextCancelledError,
    GpuQueryError,
    MalformedCsvError,
    ProcessExecutionError,
    SchemaMismatchError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "list_devices",
    "list_processes",
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "main_cli",
    # Models
    "AppConfig",
    "DeviceRecord",
    "LoggingConfig",
    "ProcessRecord",
    "QueryConfig",
    "RawRow",
    # Parsing
    "decode_rows",
    "iter_rows",
    "map_device_rows",
    "map_process_rows",
    # System
    "QueryContext",
    "QueryKind",
    "build_query_args",
    "check_nvidia_smi_installed",
    "run_query",
    # Errors
    "ContextCancelledError",
    "GpuQueryError",
    "MalformedCsvError",
    "ProcessExecutionError",
    "SchemaMismatchError",
    "ValidationError",
]
