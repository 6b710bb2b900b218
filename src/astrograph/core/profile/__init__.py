"""Profile models and dossier analysis."""

from astrograph.core.profile.analyzer import ProfileAnalyzer, profile_from_wire
from astrograph.core.profile.models import (
    TRAJECTORY_LENGTH,
    Coordinate,
    Profile,
    RiskLevel,
    Trajectory,
)

__all__ = [
    "TRAJECTORY_LENGTH",
    "Coordinate",
    "Profile",
    "ProfileAnalyzer",
    "RiskLevel",
    "Trajectory",
    "profile_from_wire",
]
