"""Colored logging formatter for console output."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name and dims the logger name on a TTY.

    ``NO_COLOR`` disables colors and ``FORCE_COLOR`` enables them regardless of
    the stream (``NO_COLOR`` wins when both are set). Usable from
    ``logging_config.json`` through the ``"()"`` factory key.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    DIM = "\033[2m"
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        *,
        stream: IO[str] | None = None,
        dim_names: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt)
        self._stream = stream
        self._dim_names = dim_names

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        if os.environ.get("FORCE_COLOR") is not None:
            return True
        stream = self._stream or sys.stderr
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if not self._use_color():
            return super().format(record)

        # Copy so other handlers sharing the record see plain text.
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelno, "")
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        if self._dim_names:
            record.name = f"{self.DIM}{record.name}{self.RESET}"
        return super().format(record)
