"""
Structured JSONL event journal for astrograph.

Writes timestamped JSON Lines events for debugging a session after the fact.
Events go to ~/.local/share/astrograph/logs/{session_id}.jsonl

Each line is valid JSON with the format:
{
  "timestamp": "2026-01-15T12:34:56.789Z",
  "event_type": "stage_transition",
  "data": { ... event-specific data ... }
}

The journal is write-only; nothing in astrograph reads it back.
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can be journaled."""

    SESSION_START = "session_start"
    STAGE_TRANSITION = "stage_transition"
    GENERATION_START = "generation_start"
    GENERATION_END = "generation_end"
    GENERATION_ERROR = "generation_error"
    NAV_LOG = "nav_log"
    SESSION_RESET = "session_reset"


class JournalEntry(BaseModel):
    """A single structured journal line."""

    model_config = ConfigDict(use_enum_values=True)

    timestamp: datetime = Field(..., description="When the event occurred (ISO 8601 format)")
    event_type: EventType = Field(..., description="Type of event")
    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


def generate_session_id() -> str:
    """
    Generate a session ID from the current UTC time.

    Format: astro-YYYYMMDD-HHMMSS (e.g., 'astro-20260124-143022')
    """
    return datetime.now(timezone.utc).strftime("astro-%Y%m%d-%H%M%S")


class AstrographLogger:
    """
    Structured JSONL journal for astrograph events.

    Example:
        journal = AstrographLogger.init("astro-20260124-143022")
        journal.log_stage_transition("INTAKE", "ASSESSMENT", generation=0)
    """

    def __init__(self, log_file: Path):
        """
        Initialize the journal with a log file path.

        Args:
            log_file: Path to the JSONL file (parent directories are created)
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def init(session_id: str, directory: Path | None = None) -> "AstrographLogger":
        """
        Initialize a journal for one session.

        Args:
            session_id: Unique session identifier (used for filename)
            directory: Override directory; defaults to $XDG_DATA_HOME/astrograph/logs

        Raises:
            ValueError: If session_id is empty
        """
        if not session_id:
            raise ValueError("session_id cannot be empty")

        if directory is None:
            xdg_data_home = os.environ.get("XDG_DATA_HOME") or os.path.expanduser(
                "~/.local/share"
            )
            directory = Path(xdg_data_home) / "astrograph" / "logs"

        return AstrographLogger(Path(directory) / f"{session_id}.jsonl")

    def log_event(self, event_type: EventType, data: dict[str, Any] | None = None) -> None:
        """
        Append one event line.

        Write failures are reported through stdlib logging and swallowed so the
        journal can never break a session.
        """
        entry = JournalEntry(
            timestamp=datetime.now(timezone.utc), event_type=event_type, data=data or {}
        )
        line = entry.model_dump_json(exclude_none=True) + "\n"

        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            logger.warning("Failed to write journal %s: %s", self.log_file, e)

    def log_stage_transition(self, from_stage: str, to_stage: str, generation: int) -> None:
        self.log_event(
            EventType.STAGE_TRANSITION,
            {"from": from_stage, "to": to_stage, "generation": generation},
        )

    def log_generation_start(self, kind: str, model: str, has_image: bool = False) -> None:
        self.log_event(
            EventType.GENERATION_START, {"kind": kind, "model": model, "has_image": has_image}
        )

    def log_generation_end(
        self,
        kind: str,
        duration_sec: float,
        input_tokens: int = 0,
        output_tokens: int = 0,
    ) -> None:
        self.log_event(
            EventType.GENERATION_END,
            {
                "kind": kind,
                "duration_sec": round(duration_sec, 3),
                "input_tokens": input_tokens,
                "output_tokens": output_tokens,
            },
        )

    def log_generation_error(self, kind: str, reason: str, message: str) -> None:
        self.log_event(
            EventType.GENERATION_ERROR, {"kind": kind, "reason": reason, "message": message}
        )

    def log_nav_entry(self, source: str, message: str) -> None:
        self.log_event(EventType.NAV_LOG, {"source": source, "message": message})

    def get_log_file(self) -> Path:
        """Get the path to the journal file."""
        return self.log_file
