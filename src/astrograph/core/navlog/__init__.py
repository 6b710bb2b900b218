"""User-visible navigation log."""

from astrograph.core.navlog.log import NavigationLog
from astrograph.core.navlog.models import LogEntry, LogSource

__all__ = ["LogEntry", "LogSource", "NavigationLog"]
