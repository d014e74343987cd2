"""Logging helpers shared by the ifacegen pipeline and CLI."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "ifacegen"
_CONSOLE_FORMAT = "[ifacegen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the ifacegen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the ifacegen logger.

    ``verbose`` wins over ``quiet`` when both are set. Existing handlers are
    dropped first so that invoking the CLI entrypoint repeatedly in one
    process does not print every record twice.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)

    return logger


class Stopwatch:
    """Elapsed wall-clock time for one unit of work."""

    def __init__(self) -> None:
        self._started = time.perf_counter()
        self.elapsed: float | None = None

    def stop(self) -> float:
        self.elapsed = time.perf_counter() - self._started
        return self.elapsed

    def __str__(self) -> str:
        seconds = self.elapsed if self.elapsed is not None else time.perf_counter() - self._started
        if seconds < 1:
            return f"{seconds * 1000:.1f}ms"
        return f"{seconds:.2f}s"


@contextmanager
def stopwatch() -> Iterator[Stopwatch]:
    watch = Stopwatch()
    try:
        yield watch
    finally:
        watch.stop()


__all__ = ["Stopwatch", "configure_logging", "get_logger", "stopwatch"]
