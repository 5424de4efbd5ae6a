"""Default leveled logger with per-context prefix fields."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Iterator, Mapping, Optional

_log = logging.getLogger("activerec")

_LOG_CONTEXT: ContextVar[Optional[dict]] = ContextVar("activerec_log_context", default=None)


class LogLevel(IntEnum):
    """Logger verbosity levels; a message is printed when its level <= the logger level."""

    PANIC = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6


_STD_LEVELS = {
    LogLevel.PANIC: logging.CRITICAL,
    LogLevel.FATAL: logging.CRITICAL,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.TRACE: logging.DEBUG,
}


@dataclass
class MockerLogger:
    """Statistics collected about a query, used to build mocks."""

    mocker_name: str = ""
    mockers: str = ""
    fixtures_selector: str = ""
    result_name: str = ""
    results: Any = None


class DefaultLogger:
    """Logger that prints its fields, the bound context fields and the arguments."""

    def __init__(self, level: int = LogLevel.INFO) -> None:
        self.level = LogLevel(level)
        self.fields: dict[str, Any] = {"orm": "activerecord"}

    @contextmanager
    def bind(self, values: Mapping[str, Any]) -> Iterator[dict]:
        """Bind prefix values for the current context; outer values fill in missing keys."""
        merged = dict(values)
        current = _LOG_CONTEXT.get()
        if current is not None:
            for key, value in current.items():
                merged.setdefault(key, value)
        token = _LOG_CONTEXT.set(merged)
        try:
            yield merged
        finally:
            _LOG_CONTEXT.reset(token)

    def context_fields(self, extra: Optional[Mapping[str, Any]] = None) -> dict:
        """Fields used for a message logged in the current context."""
        fields = dict(self.fields)
        if extra:
            fields.update(extra)
        current = _LOG_CONTEXT.get()
        if current is None:
            fields["logger.context"] = "empty"
        else:
            fields.update(current)
        return fields

    def set_log_level(self, level: int) -> None:
        self.level = LogLevel(level)

    def _emit(self, level: LogLevel, prefix: str, args: tuple) -> None:
        if self.level < level:
            return
        _log.log(_STD_LEVELS[level], "%s%s %s", prefix, self.context_fields(), list(args))

    def fatal(self, *args: Any) -> None:
        """Log the message and stop the program."""
        _log.critical("%s%s %s", "FATAL: ", self.fields, list(args))
        raise SystemExit(1)

    def error(self, *args: Any) -> None:
        self._emit(LogLevel.ERROR, "ERROR: ", args)

    def warn(self, *args: Any) -> None:
        self._emit(LogLevel.WARN, "WARN: ", args)

    def info(self, *args: Any) -> None:
        self._emit(LogLevel.INFO, "INFO: ", args)

    def debug(self, *args: Any) -> None:
        self._emit(LogLevel.DEBUG, "DEBUG: ", args)

    def trace(self, *args: Any) -> None:
        self._emit(LogLevel.TRACE, "TRACE: ", args)

    def panic(self, *args: Any) -> None:
        """Log the message and raise RuntimeError."""
        message = f"PANIC; {self.fields} {list(args)}"
        _log.critical("%s", message)
        raise RuntimeError(message)

    def collect_queries(self, func: Callable[[], Any]) -> bool:
        """Check the collector; the default logger never runs it and returns False."""
        if not callable(func):
            raise TypeError(f"query collector must be callable, got {type(func).__name__}")
        return False