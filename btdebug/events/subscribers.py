"""Ready-made event subscribers.

LoggingSubscriber mirrors events to the console through stdlib logging.
LogBuffer keeps a bounded history for whatever panel renders the log.
"""
from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Deque, List, Optional

from ..models import LogEvent
from .formatting import LOG_PREFIX, format_event
from .sink import FALLBACK_LOGGER_NAME

DEFAULT_MAX_ENTRIES = 500


class LoggingSubscriber:
    """Writes each event to a logger at the severity's level."""

    def __init__(self, logger: Optional[logging.Logger] = None, prefix: str = LOG_PREFIX):
        self._logger = logger or logging.getLogger(FALLBACK_LOGGER_NAME)
        self._prefix = prefix

    def __call__(self, event: LogEvent) -> None:
        self._logger.log(event.severity.log_level, "%s %s", self._prefix, format_event(event))


class LogBuffer:
    """Bounded FIFO history of events.

    Oldest events are dropped once max_entries is reached. Renderers read
    ``records`` (events) or ``lines()`` (timestamped strings); each event
    keeps its severity so a renderer can color it with Severity.color.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        """Initialize buffer.

        Args:
            max_entries: Maximum number of events retained.
        """
        self._records: Deque[LogEvent] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def __call__(self, event: LogEvent) -> None:
        with self._lock:
            self._records.append(event)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    @property
    def records(self) -> List[LogEvent]:
        """Snapshot of retained events, oldest first."""
        with self._lock:
            return list(self._records)

    def lines(self) -> List[str]:
        """Retained events rendered as "[HH:MM:SS] message" lines."""
        return [format_event(event, with_timestamp=True) for event in self.records]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
