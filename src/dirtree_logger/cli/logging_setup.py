"""Console logging for the dirtree command.

The library only creates module-level loggers under ``dirtree_logger``; this
module attaches the single stderr handler used by the command-line tool.
"""

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "dirtree_logger"
LOG_FORMAT = "[%(asctime)s][%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_RESET = "\033[0m"
_COLOURS = {
    logging.DEBUG: "\033[0;37m",
    logging.INFO: "\033[0;36m",
    SUCCESS: "\033[0;32m",
    logging.WARNING: "\033[0;33m",
    logging.ERROR: "\033[0;31m",
    logging.CRITICAL: "\033[0;31m",
}

_HANDLER_TAG = "_dirtree_console_handler"


class ConsoleFormatter(logging.Formatter):
    """Formatter producing ``[YYYY-mm-dd HH:MM:SS][LEVEL] message`` lines, optionally coloured."""

    def __init__(self, use_colour: bool = False) -> None:
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_colour = use_colour

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        colour = _COLOURS.get(record.levelno) if self.use_colour else None
        return f"{colour}{line}{_RESET}" if colour else line


def level_for(verbose: bool = False, quiet: bool = False, show_progress: bool = True) -> int:
    """Pick the console level from the command-line switches.

    Example:
        >>> level_for(verbose=True) == logging.DEBUG, level_for(quiet=True) == logging.ERROR
        (True, True)
        >>> level_for(show_progress=False) == logging.WARNING
        True
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO if show_progress else logging.WARNING


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach (or reconfigure) the console handler on the package logger.

    Calling this again replaces the previous handler rather than adding a second one.

    Args:
        level: Threshold for both logger and handler.
        stream: Destination, stderr by default. Colours are used only when it is a TTY.

    Returns:
        The package logger.
    """
    stream = stream if stream is not None else sys.stderr
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ConsoleFormatter(use_colour=_is_tty(stream)))
    handler.setLevel(level)
    setattr(handler, _HANDLER_TAG, True)

    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())
