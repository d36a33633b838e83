"""
Parsing of diagnostics tool output.

- decoder: CSV bytes to rows of trimmed fields
- mapper: rows to DeviceRecord / ProcessRecord by position
"""

from .decoder import decode_rows, iter_rows
from .mapper import map_device_rows, map_process_rows

__all__ = [
    "decode_rows",
    "iter_rows",
    "map_device_rows",
    "map_process_rows",
]
