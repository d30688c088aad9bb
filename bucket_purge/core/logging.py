"""
Logging Configuration Module
============================

Provides centralized logging configuration for Bucket-Purge.

This module sets up logging with:
- Console output on stderr through Rich
- Optional plain-text file logging
- Configurable log levels
- Quieted third-party SDK loggers

Functions
---------
setup_logging
    Configure application-wide logging.
get_logger
    Get a logger for a specific module.

Example
-------
>>> from bucket_purge.core.logging import setup_logging, get_logger
>>>
>>> setup_logging(level="INFO", log_file="bucket-purge.log")
>>> logger = get_logger(__name__)
>>> logger.info("Purging bucket")

See Also
--------
logging : Python standard library logging module.
rich.logging : Rich library's logging handler.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# SDK loggers that flood DEBUG output with wire-level detail
NOISY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    rich_tracebacks: bool = True,
    console: Optional[Console] = None,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Configure application-wide logging.

    Replaces the root logger's handlers with a Rich console handler and,
    when ``log_file`` is given, a file handler. Call once at startup.

    Parameters
    ----------
    level : str or int, default="INFO"
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_file : str, optional
        Path to a log file.
    rich_tracebacks : bool, default=True
        Whether to use Rich for exception tracebacks.
    console : Console, optional
        Rich Console instance. Defaults to a new stderr console.
    quiet_loggers : iterable of str
        Loggers pinned to WARNING regardless of ``level``.

    Examples
    --------
    >>> setup_logging(level="DEBUG", log_file="bucket-purge.log")
    >>> setup_logging(level="ERROR")
    """
    level = _to_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    rich_console = console or Console(stderr=True)
    console_handler = RichHandler(
        console=rich_console,
        show_time=True,
        show_path=False,
        rich_tracebacks=rich_tracebacks,
        tracebacks_show_locals=False,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(
        f"Logging configured: level={logging.getLevelName(level)}, "
        f"file={log_file or 'None'}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module (typically ``__name__``)."""
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for temporary log level changes.

    Parameters
    ----------
    logger : logging.Logger
        Logger to modify.
    level : str or int
        Temporary log level.
    handlers : iterable of logging.Handler, optional
        Handlers lowered to ``level`` for the duration as well, e.g. the root
        handlers that ``setup_logging`` pinned to the application level.

    Example
    -------
    >>> with LogContext(logging.getLogger("botocore"), "DEBUG",
    ...                 handlers=logging.getLogger().handlers):
    ...     s3.list_buckets()
    """

    def __init__(
        self,
        logger: logging.Logger,
        level: Union[str, int],
        handlers: Iterable[logging.Handler] = (),
    ) -> None:
        self.logger = logger
        self.new_level = _to_level(level)
        self.handlers = list(handlers)
        self.original_level: Optional[int] = None
        self._handler_levels: List[int] = []

    def __enter__(self) -> logging.Logger:
        self.original_level = self.logger.level
        self.logger.setLevel(self.new_level)
        self._handler_levels = [h.level for h in self.handlers]
        for handler in self.handlers:
            if handler.level > self.new_level:
                handler.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.original_level is not None:
            self.logger.setLevel(self.original_level)
        for handler, level in zip(self.handlers, self._handler_levels):
            handler.setLevel(level)
