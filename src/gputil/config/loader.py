"""
Reading of gputil's TOML configuration file.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Read a TOML file into a dictionary.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    logger.debug(f"Reading {description} from {file_path}")
    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {file_path.name}",
            severity=ErrorSeverity.ERROR,
            logger=logger,
        )
        raise


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """Read config.toml; the [query] and [logging] tables are validated by the caller."""
    return load_toml_file(config_path, "gputil configuration")
