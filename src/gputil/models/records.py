"""
Record types produced by GPU queries.

Each record maps one CSV row of `nvidia-smi` output positionally: the order
of the dataclass fields is the order of the queried columns. Values are kept
as the trimmed text the tool printed; no numeric conversion happens here.
"""

from dataclasses import dataclass, fields
from typing import ClassVar, Dict, List

# One decoded CSV record: trimmed fields in column order.
RawRow = List[str]


@dataclass(frozen=True)
class DeviceRecord:
    """
    One row of device telemetry from `--query-gpu`.

    Attributes follow the column order of the device query.
    """

    # Zero based index of the GPU. Can change at each boot.
    index: str
    # Globally unique immutable identifier of the GPU, e.g. "GPU-fd189414-...".
    uuid: str
    # Percent of the last sample period during which a kernel was executing.
    utilization_gpu: str
    # Total installed memory, MiB.
    memory_total: str
    # Memory allocated by active contexts, MiB.
    memory_used: str
    # Free memory, MiB.
    memory_free: str
    driver_version: str
    # Official product name, e.g. "NVIDIA A800-SXM4-80GB".
    name: str
    # Serial number printed on the board.
    serial: str
    # Last measured board power draw, W.
    power_draw: str
    # Software power limit, W.
    power_limit: str
    # Core temperature, degrees C.
    temperature: str
    # Query time as "YYYY/MM/DD HH:MM:SS.msec".
    timestamp: str

    FIELD_COUNT: ClassVar[int] = 13

    _JSON_KEYS: ClassVar[Dict[str, str]] = {
        "index": "index",
        "uuid": "uuid",
        "utilization_gpu": "utilizationGPU",
        "memory_total": "memoryTotal",
        "memory_used": "memoryUsed",
        "memory_free": "memoryFree",
        "driver_version": "driverVersion",
        "name": "name",
        "serial": "serial",
        "power_draw": "powerDraw",
        "power_limit": "powerLimit",
        "temperature": "temperature",
        "timestamp": "timestamp",
    }

    def to_dict(self) -> Dict[str, str]:
        """Return the record keyed by the camelCase names used in JSON output."""
        return {self._JSON_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        return (
            f"{self.index}, {self.uuid}, {self.utilization_gpu} %, "
            f"{self.memory_total} MiB, {self.memory_used} MiB, {self.memory_free} MiB, "
            f"{self.driver_version}, {self.name}, {self.serial}, "
            f"{self.power_draw} W, {self.power_limit} W, "
            f"{self.temperature}, {self.timestamp}"
        )


@dataclass(frozen=True)
class ProcessRecord:
    """
    A process holding a compute context on a device, from `--query-compute-apps`.
    """

    timestamp: str
    # Product name of the GPU the process runs on.
    name: str
    # UUID of the GPU the process runs on.
    uuid: str
    pid: str
    process_name: str
    # Device memory used by the context, MiB. Not available under Windows WDDM.
    used_memory: str

    FIELD_COUNT: ClassVar[int] = 6

    _JSON_KEYS: ClassVar[Dict[str, str]] = {
        "timestamp": "timestamp",
        "name": "name",
        "uuid": "uuid",
        "pid": "pid",
        "process_name": "processName",
        "used_memory": "usedMemory",
    }

    def to_dict(self) -> Dict[str, str]:
        """Return the record keyed by the camelCase names used in JSON output."""
        return {self._JSON_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        return (
            f"{self.timestamp}, {self.name}, {self.uuid}, {self.pid}, "
            f"{self.process_name}, {self.used_memory} MiB"
        )
