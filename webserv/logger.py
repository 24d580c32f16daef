"""Process-wide logging to the console and an optional log file."""

from __future__ import annotations

import os
import sys
import time
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    """Severity of a log message, in increasing order."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4


class Logger:
    """Writes timestamped messages at or above a minimum level."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.min_level = LogLevel.INFO
        self.console_enabled = True
        self.file_enabled = False
        self._stream = stream
        self._log_file: TextIO | None = None

    def set_log_file(self, filename: str | os.PathLike[str]) -> None:
        """Open a file for appending; an unopenable file disables file output."""
        self.close()
        try:
            self._log_file = open(filename, "a", encoding="utf-8")
        except OSError:
            self._log_file = None

    def log(self, level: LogLevel, message: str) -> None:
        if level < self.min_level:
            return
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        line = f"[{timestamp}] [{LogLevel(level).name}] {message}"
        if self.console_enabled:
            stream = self._stream if self._stream is not None else sys.stdout
            print(line, file=stream, flush=True)
        if self.file_enabled and self._log_file is not None:
            self._log_file.write(line + "\n")
            self._log_file.flush()

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.log(LogLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message)

    def fatal(self, message: str) -> None:
        self.log(LogLevel.FATAL, message)

    def close(self) -> None:
        """Close the log file, if one is open."""
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None


_instance: Logger | None = None


def get_logger() -> Logger:
    """Return the shared logger, creating it on first use."""
    global _instance
    if _instance is None:
        _instance = Logger()
    return _instance


def destroy_logger() -> None:
    """Close and discard the shared logger."""
    global _instance
    if _instance is not None:
        _instance.close()
        _instance = None