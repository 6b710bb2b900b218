"""
Roadmap data models for astrograph.
"""

from pydantic import BaseModel, ConfigDict, Field

ROADMAP_LENGTH = 5

# Milestone names, paired by index with Trajectory coordinates and Roadmap steps.
ASCENSION_PHASES: tuple[str, ...] = ("Awakening", "Ascension", "Alignment", "Radiance", "Apex")


class AscensionStep(BaseModel):
    """One actionable phase of the ascension plan."""

    model_config = ConfigDict(frozen=True)

    phase: str = Field(..., description="Phase name as returned by the model")
    instruction: str = Field(..., description="Concrete next action")
    objective: str = Field(..., description="Key objective for the phase")


Roadmap = tuple[AscensionStep, AscensionStep, AscensionStep, AscensionStep, AscensionStep]
