"""
Command-Line Interface

Parses arguments (or prompts for them interactively), merges them with the
configuration file and runs a single mirror pass or the periodic scheduler.

Author: mirrorsync Project
License: MIT
"""

import argparse
import os
import sys
import threading
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from .config.config_loader import ConfigLoader
from .config.intervals import parse_interval
from .config.schema import Config
from .core.synchronizer import create_synchronizer
from .scheduler.sync_scheduler import SyncScheduler
from .utils.logger import get_logger, setup_logging
from .utils.privileges import AdminPrivilegeHandler

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 1
EXIT_SYNC_ERROR = 2


class CLIValidationError(Exception):
    """Invalid or missing command-line input."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise CLIValidationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="mirrorsync",
        description="Mirror a source folder into a destination folder, once or periodically."
    )
    parser.add_argument("-s", "--source", help="Source directory path")
    parser.add_argument("-d", "--destination", help="Destination directory path")
    parser.add_argument(
        "-i", "--interval",
        help="Sync interval in minutes or time format (15s, 1m, 1h, 1d, 1y). Omit to run once."
    )
    parser.add_argument("--admin", action="store_true", help="Run with administrator privileges")
    parser.add_argument("-c", "--config", help="Path to YAML configuration file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Override the configured log level"
    )
    return parser


def prompt_for_arguments(input_func: Callable[[str], str] = input) -> List[str]:
    """
    Ask for the required parameters and synthesise an argument list.

    Args:
        input_func: Prompt function (injectable for tests)

    Returns:
        Equivalent command-line arguments
    """
    print("No arguments provided. Please enter the required parameters:")

    source = input_func("Source folder path: ").strip()
    destination = input_func("Destination folder path: ").strip()
    interval = input_func(
        "Sync interval (e.g. '5m' for 5 minutes, '1h' for 1 hour, or 'once' for one-time sync): "
    ).strip()
    admin = input_func("Run with administrator privileges? (y/n): ").strip().lower() == "y"

    args = ["--source", source, "--destination", destination]
    if interval and interval.lower() != "once":
        args += ["--interval", interval]
    if admin:
        args.append("--admin")
    return args


def resolve_config(args: argparse.Namespace) -> Config:
    """Load configuration and apply command-line overrides."""
    config = ConfigLoader(args.config).load()

    sync_data = config.sync.dict()
    if args.source:
        sync_data["source"] = args.source
    if args.destination:
        sync_data["destination"] = args.destination
    if args.interval:
        sync_data["interval"] = args.interval

    logging_data = config.logging.dict()
    if args.log_level:
        logging_data["log_level"] = args.log_level

    return Config(logging=logging_data, sync=sync_data, retry=config.retry.dict())


def _wait_for_interrupt(scheduler: SyncScheduler, stop_event: Optional[threading.Event] = None) -> None:
    stop_event = stop_event or threading.Event()
    logger.info("Press Ctrl+C to stop the scheduler")
    try:
        while not stop_event.wait(timeout=1.0):
            pass
    except KeyboardInterrupt:
        logger.info("Ctrl+C pressed. Stopping scheduler...")
    finally:
        scheduler.stop()
        logger.info("Scheduler stopped")


def main(
    argv: Optional[Sequence[str]] = None,
    input_func: Callable[[str], str] = input,
    admin_handler: Optional[AdminPrivilegeHandler] = None,
    stop_event: Optional[threading.Event] = None
) -> int:
    """
    Run the command-line program.

    Returns:
        Process exit code
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        argv = prompt_for_arguments(input_func)

    try:
        args = build_parser().parse_args(argv)
        config = resolve_config(args)
    except (CLIValidationError, ValidationError, ValueError) as e:
        setup_logging()
        logger.error(f"Invalid arguments: {e}")
        return EXIT_VALIDATION_ERROR

    setup_logging(
        log_level=config.logging.log_level,
        log_to_file=config.logging.log_to_file,
        log_file_path=config.logging.log_file_path,
        log_rotation_size=config.logging.log_rotation_size,
        log_retention_count=config.logging.log_retention_count,
        json_format=config.logging.json_format
    )

    if args.admin:
        admin_handler = admin_handler or AdminPrivilegeHandler()
        if not admin_handler.is_running_as_admin():
            launched = admin_handler.restart_as_admin(argv)
            return EXIT_OK if launched else EXIT_SYNC_ERROR

    source = config.sync.source
    destination = config.sync.destination

    if not source or not source.strip():
        logger.error("Source directory is required")
        return EXIT_VALIDATION_ERROR
    if not destination or not destination.strip():
        logger.error("Destination directory is required")
        return EXIT_VALIDATION_ERROR
    if not os.path.isdir(source):
        logger.error(f"Source directory does not exist: {source}")
        return EXIT_VALIDATION_ERROR

    synchronizer = create_synchronizer(
        retry_config=config.retry,
        progress_interval=config.sync.progress_interval
    )

    if config.sync.interval:
        interval = parse_interval(config.sync.interval)
        scheduler = SyncScheduler(synchronizer)
        try:
            scheduler.start(source, destination, interval)
        except ValueError as e:
            logger.error(f"Error: {e}")
            return EXIT_VALIDATION_ERROR
        _wait_for_interrupt(scheduler, stop_event)
        return EXIT_OK

    try:
        synchronizer.synchronize(source, destination)
    except ValueError as e:
        logger.error(f"Error: {e}")
        return EXIT_VALIDATION_ERROR
    except Exception as e:
        logger.error(f"Error: {e}")
        return EXIT_SYNC_ERROR

    return EXIT_OK
