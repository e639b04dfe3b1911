"""Logging setup, debug mode and terminal styles."""

import logging
import os
from typing import TextIO

__all__ = [
    "DEBUG_ENV",
    "LogObjects",
    "Style",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
    "styled",
    "use_colors",
]

DEBUG_ENV = "CMDCOMPLETE_DEBUG"


class Style:
    """SGR parameters used by cmdcomplete output."""

    WARNING = "33;2"
    ERROR = "31;2"
    CRITICAL = "31;1"
    HEADER = "32;1"  # grammar names in `cmdcomplete show`

    RESET = "\x1b[0m"


class LogObjects:
    """Reusable objects for loggers, and the debug flag."""

    handlers: list[logging.Handler] = []
    loggers: dict[str, int | None] = {}  # name -> requested level
    debug: bool = bool(os.environ.get(DEBUG_ENV))


def is_debug() -> bool:
    """Return True in debug mode (`CMDCOMPLETE_DEBUG` set, or `--debug`)."""
    return LogObjects.debug


def set_debug(value: bool) -> None:
    """Turn debug mode on or off. Loggers pick it up on the next `init_logger`."""
    LogObjects.debug = value


def use_colors(stream: TextIO) -> bool:
    """Check if ANSI styles should be written to `stream`.

    NO_COLOR wins over FORCE_COLOR, which wins over TTY detection.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    return hasattr(stream, "isatty") and stream.isatty()


def styled(text: str, style: str) -> str:
    """Wrap `text` in the SGR sequence of `style`."""
    return f"\x1b[{style}m{text}{Style.RESET}"


class ScreenLogFormatter(logging.Formatter):
    """A custom formatter, adding colors based on log level.

    Args:
        colors: Style warnings and errors with ANSI sequences
    """

    LEVEL_STYLES = {
        logging.WARNING: Style.WARNING,
        logging.ERROR: Style.ERROR,
        logging.CRITICAL: Style.CRITICAL,
    }

    def __init__(self, colors: bool) -> None:
        super().__init__()
        log_format = r"%(name)25s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        self._plain = logging.Formatter(log_format)
        self._formatters = {
            level: logging.Formatter(styled(log_format, style)) for level, style in self.LEVEL_STYLES.items() if colors
        }

    def format(self, record: logging.LogRecord) -> str:
        return self._formatters.get(record.levelno, self._plain).format(record)


def _setup(logger: logging.Logger, level: int | None) -> None:
    """Apply the level and the shared handlers to `logger`."""
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Can be called again: loggers already returned by `get_logger` are moved
    to the new handlers.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    for name in LogObjects.loggers:
        for handler in LogObjects.handlers:
            logging.getLogger(name).removeHandler(handler)
    for handler in LogObjects.handlers:
        handler.close()
    LogObjects.handlers.clear()

    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter(colors=use_colors(stream_handler.stream)))
    LogObjects.handlers.append(stream_handler)

    for name, level in LogObjects.loggers.items():
        _setup(logging.getLogger(name), level)


def get_logger(name: str = "cmdcomplete", level: int | None = None) -> logging.Logger:
    """Return a named logger.

    Args:
        name (str): logger's name
        level (int): logger's level (auto if not set)

    Returns:
        The logger instance
    """
    logger = logging.getLogger(name)
    first_call = name not in LogObjects.loggers
    LogObjects.loggers[name] = level
    _setup(logger, level)
    if first_call:
        logger.debug('Logger "%s" initialized', name)
    return logger
