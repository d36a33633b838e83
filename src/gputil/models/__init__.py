"""
Data models for GPU queries.

Record Models:
- DeviceRecord: one row of device telemetry
- ProcessRecord: one process holding a compute context
- RawRow: the trimmed fields of one decoded CSV record

Configuration Models:
- QueryConfig, LoggingConfig and the aggregating AppConfig
"""

from .config import AppConfig, LoggingConfig, QueryConfig
from .records import DeviceRecord, ProcessRecord, RawRow

__all__ = [
    # Records
    "DeviceRecord",
    "ProcessRecord",
    "RawRow",
    # Configuration
    "AppConfig",
    "LoggingConfig",
    "QueryConfig",
]
