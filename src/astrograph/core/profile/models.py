"""
Profile data models for astrograph.

A Profile is the structured result of analyzing a user's dossier: a
professional summary, a stylized archetype title, a risk classification and
a five-point growth trajectory.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

TRAJECTORY_LENGTH = 5
COORDINATE_MIN = 0.0
COORDINATE_MAX = 100.0


class RiskLevel(str, Enum):
    """How risky the charted career trajectory is.

    - LOW: steady growth
    - MEDIUM: pivoting or transforming
    - HIGH: high-risk, high-reward innovator
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Coordinate(BaseModel):
    """A point on the 0-100 career chart."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX)
    y: float = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX)


Trajectory = tuple[Coordinate, Coordinate, Coordinate, Coordinate, Coordinate]


class Profile(BaseModel):
    """
    Analyzed career profile.

    The trajectory is ordered: index 0 is the foundation milestone and
    index 4 the apex.

    Example:
        >>> profile = Profile(
        ...     summary="Backend engineer. Heading for staff level.",
        ...     archetype_name="The Forge of Distributed Systems",
        ...     risk_level=RiskLevel.MEDIUM,
        ...     trajectory=[{"x": 10, "y": 90}, {"x": 30, "y": 70}, {"x": 50, "y": 50},
        ...                 {"x": 70, "y": 30}, {"x": 90, "y": 10}],
        ... )
        >>> profile.apex
        Coordinate(x=90.0, y=10.0)
    """

    model_config = ConfigDict(frozen=True)

    summary: str = Field(..., min_length=1, description="Two-sentence professional summary")
    archetype_name: str = Field(..., min_length=1, description="Stylized constellation title")
    risk_level: RiskLevel = Field(..., description="Trajectory risk classification")
    trajectory: Trajectory = Field(..., description="Five growth coordinates, foundation to apex")

    @property
    def origin(self) -> Coordinate:
        """Foundation milestone coordinate."""
        return self.trajectory[0]

    @property
    def apex(self) -> Coordinate:
        """Apex milestone coordinate."""
        return self.trajectory[-1]

    @property
    def context(self) -> str:
        """Archetype title and summary joined, as sent to quiz generation."""
        return f"{self.archetype_name}: {self.summary}"
