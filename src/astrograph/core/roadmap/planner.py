"""
Roadmap generation and step navigation.

The planner issues at most one GENERATE_ROADMAP call per Profile and keeps
a cursor over the resulting five steps.
"""

import logging

from astrograph.core.generative.client import GenerativeClient
from astrograph.core.generative.models import CallKind
from astrograph.core.generative.schemas import AscensionStepWire
from astrograph.core.profile.models import Profile

from .models import ASCENSION_PHASES, ROADMAP_LENGTH, AscensionStep, Roadmap

logger = logging.getLogger(__name__)


def step_from_wire(wire: AscensionStepWire) -> AscensionStep:
    return AscensionStep(phase=wire.phase, instruction=wire.instruction, objective=wire.objective)


class RoadmapPlanner:
    """
    Builds and navigates the ascension roadmap for a Profile.

    Example:
        >>> planner = RoadmapPlanner(client)
        >>> roadmap = await planner.build_roadmap(profile)
        >>> planner.advance()
        1
    """

    def __init__(self, client: GenerativeClient) -> None:
        self.client = client
        self._profile: Profile | None = None
        self._roadmap: Roadmap | None = None
        self._step_index = 0
        self._epoch = 0

    @property
    def roadmap(self) -> Roadmap | None:
        return self._roadmap

    def cached_for(self, profile: Profile) -> Roadmap | None:
        """Return the cached roadmap if it was built for this profile."""
        if self._roadmap is not None and self._profile == profile:
            return self._roadmap
        return None

    async def build_roadmap(self, profile: Profile) -> Roadmap:
        """
        Generate the roadmap for a profile, reusing a cached one if present.

        Raises:
            GenerationError: If the backend fails or does not return exactly
                five steps
        """
        cached = self.cached_for(profile)
        if cached is not None:
            logger.debug("Reusing cached roadmap for %s", profile.archetype_name)
            return cached

        epoch = self._epoch
        wire = await self.client.invoke(
            CallKind.GENERATE_ROADMAP,
            {
                "archetype_name": profile.archetype_name,
                "summary": profile.summary,
                "phases": ", ".join(ASCENSION_PHASES),
            },
        )
        roadmap: Roadmap = tuple(step_from_wire(item) for item in wire)  # type: ignore[assignment]

        # A forget() while the call was in flight means the result is stale.
        if epoch == self._epoch:
            self.store(profile, roadmap)
            logger.info("Roadmap charted for %s", profile.archetype_name)
        return roadmap

    def store(self, profile: Profile, roadmap: Roadmap) -> None:
        """Cache a roadmap for a profile and rewind navigation."""
        self._profile = profile
        self._roadmap = roadmap
        self._step_index = 0

    def forget(self) -> None:
        """Drop the cached roadmap and rewind navigation."""
        self._epoch += 1
        self._profile = None
        self._roadmap = None
        self._step_index = 0

    # Navigation

    @property
    def current_step_index(self) -> int:
        return self._step_index

    def advance(self) -> int:
        """Move to the next step. No-op on the last step."""
        self._step_index = min(self._step_index + 1, ROADMAP_LENGTH - 1)
        return self._step_index

    def retreat(self) -> int:
        """Move to the previous step. No-op on the first step."""
        self._step_index = max(self._step_index - 1, 0)
        return self._step_index

    @property
    def current_step(self) -> AscensionStep | None:
        if self._roadmap is None:
            return None
        return self._roadmap[self._step_index]

    @property
    def current_milestone(self) -> str:
        return ASCENSION_PHASES[self._step_index]
