"""
Process-wide gputil configuration.

The configuration is read from conf/config.toml (or a path set with
set_config_path) on first use and cached. Queries may run from several
threads, so loading happens under a lock.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from ..models.config import AppConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_app_config

logger = logging.getLogger(__name__)

# conf/config.toml at the repository root. An installed package has no such
# file and falls back to built-in defaults.
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"

_config_lock = threading.Lock()
_cached_config: Optional[AppConfig] = None
_config_file_path = _DEFAULT_CONFIG_FILE_PATH


def set_config_path(config_path: Path) -> None:
    """
    Point gputil at another config.toml and drop the cached configuration.

    Unlike the default location, an explicitly set file must exist when the
    configuration is next loaded.
    """
    global _config_file_path, _cached_config
    with _config_lock:
        _config_file_path = Path(config_path)
        _cached_config = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """Drop the cached configuration; the next get_config() re-reads the file."""
    global _cached_config
    with _config_lock:
        _cached_config = None
    logger.debug("Configuration cache cleared")


def reset_config_path() -> None:
    """Restore the default configuration path and clear the cache."""
    global _config_file_path, _cached_config
    with _config_lock:
        _config_file_path = _DEFAULT_CONFIG_FILE_PATH
        _cached_config = None


def _load_config(config_path: Path) -> AppConfig:
    if config_path == _DEFAULT_CONFIG_FILE_PATH and not config_path.exists():
        logger.debug(f"No configuration file at {config_path}, using defaults")
        return AppConfig()

    try:
        app_config = validate_app_config(load_main_config(config_path))
    except Exception as e:
        handle_config_error(
            error=e,
            context=f"loading {config_path}",
            severity=ErrorSeverity.CRITICAL,
            logger=logger,
        )
        raise

    logger.info(
        f"Loaded configuration from {config_path} "
        f"(binary: {app_config.query.binary}, timeout: {app_config.query.timeout_seconds})"
    )
    return app_config


def get_config() -> AppConfig:
    """
    Return the cached configuration, loading it on first use.

    Raises:
        FileNotFoundError: If an explicitly set config file is missing
        ValidationError: If a setting is out of range or of the wrong type
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _cached_config
    with _config_lock:
        if _cached_config is None:
            _cached_config = _load_config(_config_file_path)
        return _cached_config


def is_config_loaded() -> bool:
    return _cached_config is not None


def get_config_info() -> Dict[str, Any]:
    """Summarize the configuration state for diagnostics."""
    config = _cached_config
    return {
        "config_loaded": config is not None,
        "config_path": str(_config_file_path),
        "binary": config.query.binary if config else None,
        "timeout_seconds": config.query.timeout_seconds if config else None,
    }
