"""
Navigation log data models.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LogSource(str, Enum):
    """Which part of the system produced a log entry."""

    SYSTEM = "SYSTEM"
    ANALYZER = "ANALYZER"
    QUIZ = "QUIZ"


class LogEntry(BaseModel):
    """A single user-visible audit line."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(..., description="When the entry was appended (UTC)")
    source: LogSource
    message: str
