"""Logging for the contribution service: rich console output plus an optional log file.

Records are handed to a ``QueueListener`` so request handlers and the calculation
run never block on console or disk I/O.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .timing import timeit

__all__ = [
    "get_logger",
    "set_level",
    "shutdown_logging",
    "log_context",
    "timeit",
]

LOG_FILE_NAME = "contributions.log"
CONSOLE_FORMAT = "%(context)s%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    app_name: str = "payroll_contrib"
    level: int = logging.INFO
    log_dir: Optional[Path] = None
    # Days of rotated log files kept next to the current one.
    backup_days: int = 14

    @classmethod
    def from_settings(cls) -> "LoggingConfig":
        # Imported lazily: configuration itself logs through this module.
        from payroll_contrib.core.config import get_settings

        settings = get_settings().logging
        return cls(level=_parse_level(settings.level), log_dir=settings.log_dir)


_lock = RLock()
_active: LoggingConfig | None = None
_listener: QueueListener | None = None
_context_filter = ContextFilter()


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _console_handler() -> logging.Handler:
    install_rich_traceback(show_locals=False)
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
        log_time_format=DATE_FORMAT,
    )
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler(cfg: LoggingConfig) -> logging.Handler:
    directory = Path(cfg.log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        directory / LOG_FILE_NAME,
        when="midnight",
        backupCount=cfg.backup_days,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _configure(cfg: LoggingConfig) -> None:
    global _active, _listener

    sinks = [_console_handler()]
    if cfg.log_dir:
        sinks.append(_file_handler(cfg))
    for sink in sinks:
        sink.setLevel(cfg.level)

    queue_handler = QueueHandler(SimpleQueue())
    queue_handler.setLevel(cfg.level)
    # Context must be captured on the producing thread.
    queue_handler.addFilter(_context_filter)

    root = logging.getLogger()
    root.setLevel(logging.NOTSET)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(queue_handler)

    _listener = QueueListener(queue_handler.queue, *sinks, respect_handler_level=True)
    _listener.start()
    _active = cfg


def _teardown() -> None:
    global _active, _listener

    if _listener is not None:
        _listener.stop()
        for sink in _listener.handlers:
            sink.close()
    _listener = None
    _active = None
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger, configuring logging from settings on first use."""

    with _lock:
        if _active is None:
            _configure(LoggingConfig.from_settings())
        app_name = _active.app_name
    return logging.getLogger(name or app_name)


def set_level(level: str | int) -> None:
    """Change the threshold of the queue and every sink behind it."""

    new_level = _parse_level(level)
    with _lock:
        global _active

        for handler in logging.getLogger().handlers:
            handler.setLevel(new_level)
        if _listener is not None:
            for sink in _listener.handlers:
                sink.setLevel(new_level)
        if _active is not None:
            _active = replace(_active, level=new_level)


def shutdown_logging() -> None:
    """Flush queued records and detach all handlers; the next ``get_logger`` reconfigures."""

    with _lock:
        _teardown()
