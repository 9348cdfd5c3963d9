"""Console output for the template commands."""

from __future__ import annotations

import sys
from enum import Enum
from typing import TextIO

RESET = "\x1b[0m"


class Level(Enum):
    """Output levels and the ANSI style each one is printed with."""

    HEADER = "\x1b[1m"
    STEP = "\x1b[34m"
    INFO = "\x1b[36m"
    SUCCESS = "\x1b[32m"
    WARNING = "\x1b[33m"
    ERROR = "\x1b[31m"


def style(level: Level, message: str, color: bool = True) -> str:
    """Wrap a message in the terminal color for its level."""
    if not color:
        return message
    return f"{level.value}{message}{RESET}"


class Reporter:
    """Prints styled lines and keeps a record of them."""

    def __init__(self, color: bool = True, stream: TextIO | None = None) -> None:
        self._color = color
        self._stream = stream
        self.lines: list[tuple[Level, str]] = []

    def emit(self, level: Level, message: str) -> None:
        self.lines.append((level, message))
        print(style(level, message, self._color), file=self._stream or sys.stdout)

    def header(self, message: str) -> None:
        self.emit(Level.HEADER, message)

    def step(self, message: str) -> None:
        self.emit(Level.STEP, message)

    def info(self, message: str) -> None:
        self.emit(Level.INFO, message)

    def success(self, message: str) -> None:
        self.emit(Level.SUCCESS, message)

    def warning(self, message: str) -> None:
        self.emit(Level.WARNING, message)

    def error(self, message: str) -> None:
        self.emit(Level.ERROR, message)

    def messages(self, level: Level | None = None) -> list[str]:
        return [text for lvl, text in self.lines if level is None or lvl is level]
