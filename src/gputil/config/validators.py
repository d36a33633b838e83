"""
Configuration validation utilities.

This module turns the raw TOML tables into validated configuration models.
"""

import logging
from typing import Any, Dict

from ..models.config import AppConfig, LoggingConfig, QueryConfig
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_executable_name,
    validate_positive_float,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_query_config(query_data: Dict[str, Any]) -> QueryConfig:
    """
    Validate and create a QueryConfig from the raw `[query]` table.

    Missing keys take the QueryConfig defaults.

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(query_data, dict):
        raise ValidationError("[query] must be a table", field_name="query", value=query_data)

    defaults = QueryConfig()

    binary = validate_executable_name(
        query_data.get("binary", defaults.binary),
        field_name="query.binary",
    )

    timeout_seconds = query_data.get("timeout_seconds", defaults.timeout_seconds)
    if timeout_seconds is not None:
        timeout_seconds = validate_positive_float(
            timeout_seconds,
            min_value=0.001,
            field_name="query.timeout_seconds",
        )

    poll_interval_seconds = validate_positive_float(
        query_data.get("poll_interval_seconds", defaults.poll_interval_seconds),
        min_value=0.001,  # 1ms minimum
        max_value=10.0,
        field_name="query.poll_interval_seconds",
    )

    termination_timeout_seconds = validate_positive_float(
        query_data.get("termination_timeout_seconds", defaults.termination_timeout_seconds),
        min_value=0.1,
        max_value=60.0,
        field_name="query.termination_timeout_seconds",
    )

    return QueryConfig(
        binary=binary,
        timeout_seconds=timeout_seconds,
        poll_interval_seconds=poll_interval_seconds,
        termination_timeout_seconds=termination_timeout_seconds,
    )


def validate_logging_config(logging_data: Dict[str, Any]) -> LoggingConfig:
    """
    Validate and create a LoggingConfig from the raw `[logging]` table.

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(logging_data, dict):
        raise ValidationError("[logging] must be a table", field_name="logging", value=logging_data)

    level = validate_enum_choice(
        logging_data.get("level", LoggingConfig().level),
        choices=LOG_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )
    return LoggingConfig(level=level)


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate the whole parsed configuration file.

    Unknown top-level tables are ignored with a warning.
    """
    known = {"query", "logging"}
    for key in config_data:
        if key not in known:
            logger.warning(f"Ignoring unknown configuration table [{key}]")

    return AppConfig(
        query=validate_query_config(config_data.get("query", {})),
        logging=validate_logging_config(config_data.get("logging", {})),
    )
