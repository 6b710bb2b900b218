"""Session state and the stage machine that advances it."""

from astrograph.core.stage.machine import StageMachine, build_machine
from astrograph.core.stage.models import SessionSnapshot, SessionState, Stage

__all__ = ["SessionSnapshot", "SessionState", "Stage", "StageMachine", "build_machine"]
