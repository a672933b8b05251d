"""Logging configuration and utilities for py_interceptcalc library.

All library messages go through the `py_icalc` logger:

- DEBUG: the drag solver reports the flight time and stage that produced a solution
  (scan, refined, best sample) with the number of evaluations, and when refinement
  misses the tolerance and the best integer sample is used instead; engines report
  why `solve()` collapsed to None; config discovery reports which pyic.toml was read.
- INFO: engine classes loaded from entry points.
- WARNING: the Calculator falling back to its secondary engine; a config file
  without `pyic` / `pyic.physics` sections.
- ERROR: entry points that fail to load.

Only console logging at INFO level is enabled by default. File logging captures DEBUG.

Global Variables:
    - logger: Pre-configured logger instance for the library.
    - file_handler: Global file handler reference (None when file logging disabled).

Functions:
    enable_file_logging: Enable logging to a file with DEBUG level.
    disable_file_logging: Disable file logging and clean up resources.

Examples:
    ```python
    from py_interceptcalc.logger import enable_file_logging, disable_file_logging

    enable_file_logging("intercept_debug.log")
    # ... intercept calculations ...
    disable_file_logging()
    ```
"""
import logging
from typing import Optional

__all__ = ('logger',
           'enable_file_logging',
           'disable_file_logging',
)

formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.DEBUG)  # Lowest level for console

logger: logging.Logger = logging.getLogger('py_icalc')
logger.addHandler(console_handler)
logger.setLevel(logging.INFO)

# File handler (optional, added dynamically)
file_handler: Optional[logging.FileHandler] = None


def enable_file_logging(filename: str = "debug.log") -> None:
    """Enable logging to a file with DEBUG level output.

    Replaces any existing file handler. The file is opened in append mode.

    Args:
        filename: Name of the log file to create. Defaults to "debug.log".
    """
    global file_handler
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(logging.DEBUG)  # Log everything to the file
    file_formatter = logging.Formatter("%(asctime)s:%(levelname)s:%(message)s")
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)


def disable_file_logging() -> None:
    """Remove the file handler and close it. Safe to call when file logging is off."""
    global file_handler
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
