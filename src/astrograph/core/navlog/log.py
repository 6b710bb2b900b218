"""
Append-only navigation log.

The log is the user-visible audit trail of a session. It survives resets
and never shrinks.
"""

from collections.abc import Iterator
from datetime import datetime, timezone

from astrograph.utils.logging import AstrographLogger

from .models import LogEntry, LogSource


class NavigationLog:
    """
    Time-ordered list of LogEntry records.

    Example:
        >>> log = NavigationLog()
        >>> log.append(LogSource.SYSTEM, "Astrograph initialized.")
        >>> len(log)
        1
    """

    def __init__(self, journal: AstrographLogger | None = None) -> None:
        self._entries: list[LogEntry] = []
        self.journal = journal

    def append(self, source: LogSource, message: str) -> LogEntry:
        """Append an entry stamped with the current UTC time."""
        entry = LogEntry(timestamp=datetime.now(timezone.utc), source=source, message=message)
        self._entries.append(entry)
        if self.journal:
            self.journal.log_nav_entry(source.value, message)
        return entry

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def tail(self, n: int) -> tuple[LogEntry, ...]:
        """The last n entries, oldest first."""
        if n <= 0:
            return ()
        return tuple(self._entries[-n:])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries)
