"""Logging setup: rich console output plus one log file per day.

Records are handed to a queue on the calling thread and written by a
``QueueListener`` thread, so request handlers never block on file I/O.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .timing import timeit

if TYPE_CHECKING:
    from app.core.config import LoggingSettings

__all__ = [
    "DailyFileHandler",
    "LoggingConfig",
    "get_logger",
    "init_logging",
    "log_context",
    "shutdown_logging",
    "timeit",
]

APP_LOGGER_NAME = "salary_history"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_dir: Optional[str] = "logs"
    console: bool = True
    rich_tracebacks: bool = True

    @classmethod
    def from_settings(cls, settings: "LoggingSettings") -> "LoggingConfig":
        return cls(level=settings.level, log_dir=settings.log_dir)

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Read ``LOG_LEVEL``/``LOG_DIR`` directly; used before settings exist."""

        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", "logs") or None,
        )

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.level.upper(), logging.INFO)


class DailyFileHandler(logging.FileHandler):
    """Write to ``<directory>/YYYY_MM_DD.log``, switching files at midnight."""

    def __init__(self, directory: Path, *, encoding: str = "utf-8") -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._day = datetime.now().date()
        super().__init__(self.path_for(self._day), mode="a", encoding=encoding)

    def path_for(self, day: date) -> Path:
        return self.directory / f"{day:%Y_%m_%d}.log"

    def emit(self, record: logging.LogRecord) -> None:
        day = datetime.fromtimestamp(record.created).date()
        if day != self._day:
            self._day = day
            self.close()
            self.baseFilename = os.fspath(self.path_for(day))
        # FileHandler reopens the stream lazily after close().
        super().emit(record)


_lock = RLock()
_active: LoggingConfig | None = None
_listener: QueueListener | None = None
_context_filter = ContextFilter()


def _console_handler(config: LoggingConfig) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=config.rich_tracebacks,
        show_path=False,
        markup=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(context)s%(message)s"))
    return handler


def _file_handler(config: LoggingConfig) -> logging.Handler:
    handler = DailyFileHandler(Path(config.log_dir))
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def init_logging(config: LoggingConfig | None = None) -> None:
    """Install the queue-backed handlers on the root logger.

    Calling again with an equal configuration is a no-op; a different one
    replaces the running listener.
    """

    config = config or LoggingConfig.from_env()
    with _lock:
        global _active, _listener
        if _active == config:
            return
        _teardown()

        handlers: list[logging.Handler] = []
        if config.console:
            handlers.append(_console_handler(config))
        if config.log_dir:
            handlers.append(_file_handler(config))
        for handler in handlers:
            handler.setLevel(config.numeric_level)
            handler.addFilter(_context_filter)

        if config.rich_tracebacks:
            install_rich_traceback(show_locals=False)

        root = logging.getLogger()
        root.setLevel(config.numeric_level)
        if handlers:
            log_queue: SimpleQueue = SimpleQueue()
            queue_handler = QueueHandler(log_queue)
            # Context must be captured here; the listener thread has none.
            queue_handler.addFilter(_context_filter)
            root.addHandler(queue_handler)
            _listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
            _listener.start()
        _active = config


def _teardown() -> None:
    global _active, _listener
    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
    _listener = None
    _active = None
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


def shutdown_logging() -> None:
    """Flush queued records and detach every handler."""

    with _lock:
        _teardown()


def get_logger(name: str | None = None) -> logging.Logger:
    with _lock:
        if _active is None:
            init_logging()
    return logging.getLogger(name or APP_LOGGER_NAME)
