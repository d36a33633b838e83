"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class QueryConfig:
    """
    Settings for invoking the diagnostics tool, from the `[query]` table.
    """

    # Executable name resolved via PATH, or an explicit path.
    binary: str = "nvidia-smi"
    # Deadline applied when the caller passes no context. None waits forever.
    timeout_seconds: Optional[float] = None
    # How often the wait loop re-checks the context for cancellation.
    poll_interval_seconds: float = 0.1
    # How long to wait for a killed process tree to disappear.
    termination_timeout_seconds: float = 3.0


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging settings, from the `[logging]` table.
    """

    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    query: QueryConfig = field(default_factory=QueryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
