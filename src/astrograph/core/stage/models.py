"""
Session state models for astrograph.

SessionState is the single aggregate the StageMachine owns. It is replaced
wholesale on every transition; nothing mutates it in place.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from astrograph.core.generative.models import CallKind
from astrograph.core.navlog.models import LogEntry
from astrograph.core.profile.models import Profile
from astrograph.core.quiz.models import QuizSession
from astrograph.core.roadmap.models import AscensionStep, Roadmap


class Stage(str, Enum):
    """
    Discovery flow stages, in order.

    INTAKE -> ANALYSIS -> ASSESSMENT -> ROADMAP, plus reset to INTAKE.
    """

    INTAKE = "INTAKE"
    ANALYSIS = "ANALYSIS"
    ASSESSMENT = "ASSESSMENT"
    ROADMAP = "ROADMAP"


class SessionState(BaseModel):
    """
    Everything the flow has produced so far.

    Which artifacts are present is fixed by the stage:
    ANALYSIS has a profile, ASSESSMENT adds a quiz session and ROADMAP adds
    the roadmap. INTAKE has none of them.
    """

    model_config = ConfigDict(frozen=True)

    stage: Stage = Stage.INTAKE
    profile: Profile | None = None
    quiz_session: QuizSession | None = None
    roadmap: Roadmap | None = None
    generation: int = Field(default=0, ge=0, description="Bumped on every reset")

    @model_validator(mode="after")
    def _check_artifacts(self) -> "SessionState":
        expected = {
            Stage.INTAKE: (False, False, False),
            Stage.ANALYSIS: (True, False, False),
            Stage.ASSESSMENT: (True, True, False),
            Stage.ROADMAP: (True, True, True),
        }[self.stage]
        present = (
            self.profile is not None,
            self.quiz_session is not None,
            self.roadmap is not None,
        )
        if present != expected:
            raise ValueError(
                f"{self.stage.value} state has profile/quiz/roadmap presence {present}, "
                f"expected {expected}"
            )
        return self


class SessionSnapshot(BaseModel):
    """Read-only view of the session for presentation."""

    model_config = ConfigDict(frozen=True)

    stage: Stage
    profile: Profile | None = None
    quiz_session: QuizSession | None = None
    roadmap: Roadmap | None = None
    generation: int = 0
    roadmap_step_index: int = 0
    current_step: AscensionStep | None = None
    current_milestone: str | None = None
    loading: tuple[CallKind, ...] = Field(
        default=(), description="Call kinds in flight for the current generation"
    )
    log: tuple[LogEntry, ...] = ()

    @property
    def is_loading(self) -> bool:
        return bool(self.loading)
