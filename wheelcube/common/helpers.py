#!/usr/bin/env python3
"""
helpers.py - Common Runner Utilities

Provides shared functionality for vehicle simulation scripts:
- Logging setup
- Standard argument parser
- Signal handling for graceful shutdown

Usage:
    from wheelcube.common import (
        setup_logging,
        create_argument_parser,
        setup_signal_handlers,
        is_shutdown_requested,
    )
"""

import argparse
import logging
import signal

# Module-level logger
logger = logging.getLogger(__name__)

# Global shutdown flag for signal handling
_shutdown_requested = False


def _signal_handler(signum, frame):
    """Handle shutdown signals (Ctrl+C)."""
    global _shutdown_requested
    logger.warning("Shutdown requested (Ctrl+C)")
    _shutdown_requested = True


def is_shutdown_requested() -> bool:
    """
    Check if shutdown has been requested.

    Returns:
        bool: True if shutdown was requested via signal.
    """
    return _shutdown_requested


def clear_shutdown_request() -> None:
    """Reset the shutdown flag (used between runs in one process)."""
    global _shutdown_requested
    _shutdown_requested = False


def setup_signal_handlers():
    """Set up signal handlers for graceful shutdown."""
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)


def setup_logging(
    level: int = logging.INFO,
    format_string: str = "%(asctime)s [%(levelname)s] %(message)s",
    datefmt: str = "%H:%M:%S",
) -> logging.Logger:
    """
    Configure logging for vehicle scripts.

    Args:
        level: Logging level (default: INFO).
        format_string: Log message format.
        datefmt: Date format string.

    Returns:
        logging.Logger: Configured root logger.
    """
    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt=datefmt,
    )
    return logging.getLogger()


def create_argument_parser(
    description: str,
    add_verbose: bool = True,
    add_http: bool = True,
) -> argparse.ArgumentParser:
    """
    Create a standard argument parser.

    Args:
        description: Script description.
        add_verbose: Add --verbose flag.
        add_http: Add --http-port and --no-http options.

    Returns:
        argparse.ArgumentParser: Configured parser.
    """
    parser = argparse.ArgumentParser(description=description)

    if add_verbose:
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable verbose logging",
        )

    if add_http:
        parser.add_argument(
            "--http-port",
            type=int,
            default=8080,
            help="HTTP status API port (default: 8080)",
        )
        parser.add_argument(
            "--no-http",
            action="store_true",
            help="Do not start the HTTP status server",
        )

    return parser
