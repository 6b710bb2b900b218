"""
Dossier analysis.

Turns raw user input (free text and/or an image) into a Profile by way of
one ANALYZE_PROFILE backend call.
"""

import logging

from astrograph.core.errors import ValidationError
from astrograph.core.generative.client import GenerativeClient
from astrograph.core.generative.models import CallKind, ImageAttachment
from astrograph.core.generative.schemas import ProfileWire

from .models import Coordinate, Profile, RiskLevel

logger = logging.getLogger(__name__)


def profile_from_wire(wire: ProfileWire) -> Profile:
    """Map a validated ANALYZE_PROFILE response onto the domain model."""
    return Profile(
        summary=wire.summary,
        archetype_name=wire.constellation_name,
        risk_level=RiskLevel(wire.threat_level),
        trajectory=tuple(Coordinate(x=c.x, y=c.y) for c in wire.coordinates),
    )


class ProfileAnalyzer:
    """Produces a Profile from a user's dossier."""

    def __init__(self, client: GenerativeClient) -> None:
        self.client = client

    @staticmethod
    def check_input(free_text: str, image: ImageAttachment | None) -> None:
        """
        Reject input that must never reach the backend.

        Raises:
            ValidationError: If both the text and the image are empty
        """
        if not (free_text or "").strip() and image is None:
            raise ValidationError("dossier", "Provide dossier text or an image")

    async def analyze(self, free_text: str, image: ImageAttachment | None = None) -> Profile:
        """
        Analyze a dossier.

        Args:
            free_text: Resume, portfolio notes or career vision (may be empty
                when an image is supplied)
            image: Optional image of a resume or portfolio

        Returns:
            The analyzed Profile

        Raises:
            ValidationError: If there is nothing to analyze
            GenerationError: If the backend call fails or returns a response
                that does not match the schema (e.g. not exactly 5 coordinates)
        """
        self.check_input(free_text, image)

        wire = await self.client.invoke(
            CallKind.ANALYZE_PROFILE,
            {"dossier": (free_text or "").strip()},
            image=image,
        )
        profile = profile_from_wire(wire)
        logger.info("Profile analyzed: %s (%s)", profile.archetype_name, profile.risk_level.value)
        return profile
