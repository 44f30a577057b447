"""Logging utilities for gabframe.

Every module obtains its logger through :func:`get_logger` so that all
output shares one ``gabframe.*`` namespace and one formatting policy.
Records are written to stderr as ``[LEVEL] name: message`` and do not
propagate to the root logger; the library is quiet below WARNING.

Levels may be given as ``logging`` constants or by name, in any case.

Example:
    >>> import logging
    >>> from gabframe.logging import configure_logging, set_log_level
    >>> set_log_level("debug")          # same as logging.DEBUG
    >>> configure_logging(logging.INFO, format_string="%(name)s %(message)s")
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_DEFAULT_LEVEL = logging.WARNING
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_loggers: dict[str, logging.Logger] = {}


def _resolve_level(level: int | str) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level {level!r}.")
        return resolved
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a logger for the given module name.

    Loggers are cached to avoid duplicate handlers. The logger name should
    typically be ``__name__`` from the calling module.

    Args:
        name: Logger name (typically ``__name__``). If None, returns the
            package logger.

    Returns:
        Configured logger instance.

    Example:
        >>> from gabframe.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("iwfac plan ready")
    """
    if name is None:
        name = "gabframe"

    logger_name = name if name == "gabframe" or name.startswith("gabframe.") else f"gabframe.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)

    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))

        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the logging level for all gabframe loggers.

    Args:
        level: Logging level (``logging.DEBUG``, ``logging.INFO``, ...) or
            its name ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL').

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    level = _resolve_level(level)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Configure logging for gabframe.

    Replaces the handlers of every logger created so far and sets the
    default used by loggers created later.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string. If None, uses the default.
        stream: Output stream (default: sys.stderr).

    Example:
        >>> import logging
        >>> from gabframe.logging import configure_logging
        >>> configure_logging(level=logging.DEBUG)
    """
    level = _resolve_level(level)

    if stream is None:
        stream = sys.stderr

    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level
