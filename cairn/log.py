"""Levelled logging with lazy arguments and pluggable output."""

from __future__ import annotations

import sys
import threading
from enum import IntEnum
from typing import Any, Callable, Optional


class Level(IntEnum):
    ERROR = 0
    WARNING = 1
    VERBOSE = 2
    DEBUG = 3


LEVEL_LABELS = ("!ERR", "WARN", "", "debug")

Formatter = Callable[[Level, str], str]
Publisher = Callable[[Level, str], None]

_stderr_lock = threading.Lock()


def _default_pre_format(level: Level, text: str) -> str:
    label = LEVEL_LABELS[level]
    return f"{text}{label} " if label else text


def _default_publisher(level: Level, message: str) -> None:
    with _stderr_lock:
        print(message, file=sys.stderr, flush=True)


def _resolve(arg: Any) -> Any:
    while callable(arg):
        arg = arg()
    return arg


class Log:
    """A logger; messages above the configured level are never formatted.

    Arguments that are callables are evaluated only when the message is emitted.
    """

    def __init__(
        self,
        level: Level = Level.VERBOSE,
        pre_format: Optional[Formatter] = _default_pre_format,
        post_format: Optional[Formatter] = None,
        publisher: Publisher = _default_publisher,
    ) -> None:
        self._level = Level(level)
        self._pre_format = pre_format
        self._post_format = post_format
        self._publisher = publisher

    def is_level_enabled(self, level: Level) -> bool:
        return self._level >= level

    def set_level(self, level: Level) -> None:
        self._level = Level(level)

    def set_formatter(self, pre_format: Optional[Formatter], post_format: Optional[Formatter]) -> None:
        self._pre_format = pre_format
        self._post_format = post_format

    def set_publisher(self, publisher: Publisher) -> None:
        self._publisher = publisher

    def output(self, level: Level, fmt: str, *args: Any) -> None:
        if not self.is_level_enabled(level):
            return
        text = self._pre_format(level, "") if self._pre_format else ""
        text += fmt.format(*(_resolve(a) for a in args))
        if self._post_format:
            text = self._post_format(level, text)
        self._publisher(level, text)

    def debug(self, fmt: str, *args: Any) -> None:
        self.output(Level.DEBUG, fmt, *args)

    def verbose(self, fmt: str, *args: Any) -> None:
        self.output(Level.VERBOSE, fmt, *args)

    def warning(self, fmt: str, *args: Any) -> None:
        self.output(Level.WARNING, fmt, *args)

    def error(self, fmt: str, *args: Any) -> None:
        self.output(Level.ERROR, fmt, *args)