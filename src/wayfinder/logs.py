"""Logging setup with injectable sinks.

Sinks are ordinary ``logging.Handler`` objects attached to the ``wayfinder``
logger only; nothing process-wide is patched.  ``MemorySink`` keeps the most
recent records in memory so a debug view (or a test) can read them back.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Iterable, List, Optional

LOGGER_NAME = "wayfinder"
DEFAULT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(message)s"


class MemorySink(logging.Handler):
    def __init__(self, capacity: int = 500, level: int = logging.NOTSET):
        super().__init__(level=level)
        self._records: Deque[logging.LogRecord] = deque(maxlen=capacity)
        self.setFormatter(logging.Formatter(DEFAULT_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> List[logging.LogRecord]:
        return list(self._records)

    def messages(self, min_level: int = logging.NOTSET) -> List[str]:
        return [r.getMessage() for r in self._records if r.levelno >= min_level]

    def dump(self) -> str:
        """All captured records, formatted one per line."""
        return "\n".join(self.format(r) for r in self._records)

    def clear(self) -> None:
        self._records.clear()


def configure_logging(
    level: str | int = "INFO",
    sinks: Optional[Iterable[logging.Handler]] = None,
    console: bool = True,
) -> logging.Logger:
    """(Re)configure the ``wayfinder`` logger and return it.

    Calling it again replaces the handlers installed by the previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False

    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        logger.addHandler(stream)

    for sink in sinks or ():
        logger.addHandler(sink)
    return logger
