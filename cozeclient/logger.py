"""Levelled logging used by the client."""

from __future__ import annotations

import sys
import time
from enum import IntEnum
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Severity of a log record; higher is more severe."""

    TRACE = 1
    DEBUG = 2
    INFO = 3
    WARN = 4
    ERROR = 5

    def __str__(self) -> str:
        return self.name


def _level_name(level: Any) -> str:
    try:
        return LogLevel(level).name
    except ValueError:
        return ""


def _format(message: str, args: tuple) -> str:
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError):
        return " ".join([message, *map(str, args)])


class StdLogger:
    """Writes timestamped records to a text stream (standard error by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def log(self, level: LogLevel, message: str, *args: Any) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        stamp = time.strftime("%Y/%m/%d %H:%M:%S")
        stream.write(f"{stamp} [{_level_name(level)}] {_format(message, args)}\n")
        stream.flush()


class LevelLogger:
    """Forwards records at or above a threshold to another logger."""

    def __init__(self, logger: Any, level: LogLevel) -> None:
        self.logger = logger
        self.level = level

    def set_level(self, level: LogLevel) -> None:
        self.level = level

    def log(self, level: LogLevel, message: str, *args: Any) -> None:
        if level >= self.level:
            self.logger.log(level, message, *args)

    def debug(self, message: str, *args: Any) -> None:
        self.log(LogLevel.DEBUG, message, *args)

    def info(self, message: str, *args: Any) -> None:
        self.log(LogLevel.INFO, message, *args)

    def warn(self, message: str, *args: Any) -> None:
        self.log(LogLevel.WARN, message, *args)

    def error(self, message: str, *args: Any) -> None:
        self.log(LogLevel.ERROR, message, *args)


_default_logger = LevelLogger(StdLogger(), LogLevel.INFO)


def get_logger() -> LevelLogger:
    """Return the logger the client writes to."""
    return _default_logger


def set_logger(logger: Any) -> None:
    """Replace the sink behind the client's logger, keeping its level."""
    _default_logger.logger = logger


def set_level(level: LogLevel) -> None:
    """Set the minimum level the client's logger lets through."""
    _default_logger.set_level(level)