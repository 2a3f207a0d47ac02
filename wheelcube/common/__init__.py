"""
Common utilities for the vehicle controller scripts.

This package provides shared functionality used by the simulation runner
and any other driver of the controller.

Modules:
    helpers: Logging, argument parsing and signal handling.
    telemetry: Telemetry snapshot and CSV recorder.
"""

from .helpers import (
    setup_logging,
    create_argument_parser,
    setup_signal_handlers,
    is_shutdown_requested,
    clear_shutdown_request,
)

from .telemetry import (
    TelemetrySnapshot,
    TelemetryRecorder,
    CSV_HEADER,
)

__all__ = [
    # helpers
    "setup_logging",
    "create_argument_parser",
    "setup_signal_handlers",
    "is_shutdown_requested",
    "clear_shutdown_request",
    # telemetry
    "TelemetrySnapshot",
    "TelemetryRecorder",
    "CSV_HEADER",
]
