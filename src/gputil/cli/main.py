"""
Command-line interface for gputil.

Runs one device or process query and prints the records, one per line or as
a JSON array.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..gpu import list_devices, list_processes
from ..system.commands import check_nvidia_smi_installed
from ..system.context import QueryContext
from ..validation import (
    ContextCancelledError,
    GpuQueryError,
    ProcessExecutionError,
    ValidationError,
    handle_cli_error,
    validate_positive_float,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

# Exit status for a query that ran out of time, as timeout(1) uses.
EXIT_CANCELLED = 124

logger = logging.getLogger(__name__)


def _tool_exit_status(error: ProcessExecutionError) -> int:
    """Exit status to report for a failed tool run, shell style for signals."""
    if error.exit_code is None:
        return 1
    if error.exit_code < 0:
        # Popen reports death by signal N as -N
        return 128 - error.exit_code
    return error.exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gputil",
        description="Query GPU devices and compute processes through nvidia-smi.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a config.toml file (defaults to conf/config.toml).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("devices", "List GPUs with utilization, memory, power and temperature."),
        ("processes", "List processes holding a compute context on a GPU."),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "-i",
            "--id",
            dest="selectors",
            action="append",
            default=[],
            metavar="SELECTOR",
            help="GPU index or UUID to query. Repeat for several devices.",
        )
        sub.add_argument(
            "--timeout",
            type=float,
            help="Seconds to wait for nvidia-smi (overrides the configured timeout).",
        )
        sub.add_argument(
            "--json",
            action="store_true",
            help="Print a JSON array instead of one line per record.",
        )
    return parser


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: With the tool's exit status when it fails, 124 when the
            query times out, 1 on any other error.
    """
    args = build_parser().parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)
    try:
        app_config = get_config()
    except Exception as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    logging.basicConfig(
        level=args.log_level or app_config.logging.level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    query_config = app_config.query
    if not check_nvidia_smi_installed(query_config.binary):
        logger.warning(f"'{query_config.binary}' was not found on PATH")

    try:
        if args.timeout is not None:
            timeout = validate_positive_float(args.timeout, min_value=0.001, field_name="--timeout")
            context = QueryContext.with_timeout(timeout)
        else:
            context = None

        if args.command == "devices":
            records = list_devices(context, *args.selectors, config=query_config)
        else:
            records = list_processes(context, *args.selectors, config=query_config)
    except ProcessExecutionError as e:
        handle_cli_error(error=e, context=f"{args.command} query", exit_code=_tool_exit_status(e), logger=logger)
    except ContextCancelledError as e:
        handle_cli_error(error=e, context=f"{args.command} query", exit_code=EXIT_CANCELLED, logger=logger)
    except (GpuQueryError, ValidationError) as e:
        handle_cli_error(error=e, context=f"{args.command} query", exit_code=1, logger=logger)

    if args.json:
        print(json.dumps([record.to_dict() for record in records], indent=2))
    else:
        for record in records:
            print(record)


if __name__ == "__main__":
    main_cli()
