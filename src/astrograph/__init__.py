"""
Astrograph - career discovery in the terminal

Analyzes a dossier into a constellation profile, runs a short aptitude
assessment and charts a five-phase ascension roadmap.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from astrograph.core.profile.models import Profile, RiskLevel
from astrograph.core.stage.models import SessionSnapshot, Stage

__all__ = ["Profile", "RiskLevel", "SessionSnapshot", "Stage", "__version__"]
