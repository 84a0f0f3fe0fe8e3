"""Operator-facing activity log.

The studio shows a short terminal-style panel of recent events. Failures of
background operations (sync, listing, file fetches) end up here instead of
being raised.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 16

LogLevel = Literal["info", "error"]


class LogEntry(BaseModel):
    """A single line in the activity log.

    Attributes:
        message: Human-readable text.
        level: "info" or "error".
        timestamp: When the entry was recorded (UTC).
    """

    message: str
    level: LogLevel = "info"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ActivityLog:
    """Bounded log of recent studio events.

    Only the newest ``max_entries`` entries are kept. Every entry is also
    forwarded to the standard logging module.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    def add(self, message: str, level: LogLevel = "info") -> LogEntry:
        entry = LogEntry(message=message, level=level)
        self._entries.append(entry)
        if level == "error":
            logger.error(message)
        else:
            logger.info(message)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.add(message, "info")

    def error(self, message: str) -> LogEntry:
        return self.add(message, "error")

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def errors(self) -> list[LogEntry]:
        return [entry for entry in self._entries if entry.level == "error"]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
