"""
Configuration data models for astrograph.

These models define the structure of .astrograph.json and
~/.config/astrograph/config.json files, with validation via Pydantic.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BackendConfig(BaseModel):
    """
    Generative backend configuration.

    Selects which registered backend to use and how to reach it.
    """
    name: str = Field(
        default="gemini",
        min_length=1,
        description="Registered backend name (e.g., 'gemini')"
    )
    model: str = Field(
        default="gemini-3-flash-preview",
        min_length=1,
        description="Model identifier sent with every request"
    )
    api_key_env: list[str] = Field(
        default_factory=lambda: ["GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"],
        min_length=1,
        description="Environment variables searched (in order) for the API key"
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Per-request timeout; None leaves the SDK default"
    )


class QuizConfig(BaseModel):
    """Assessment generation settings."""
    question_count: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Number of questions requested from the backend"
    )


class JournalConfig(BaseModel):
    """
    Structured event journal settings.

    The journal is a write-only JSONL trace of stage transitions and
    backend calls, useful for debugging a session after the fact.
    """
    enabled: bool = Field(
        default=True,
        description="Write the JSONL event journal"
    )
    directory: Optional[str] = Field(
        default=None,
        description="Override journal directory (defaults to XDG data home)"
    )


class AstrographConfig(BaseModel):
    """
    Top-level astrograph configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = AstrographConfig(
        ...     backend=BackendConfig(model="gemini-2.5-flash"),
        ...     quiz=QuizConfig(question_count=5),
        ... )
        >>> config.quiz.question_count
        5
    """
    backend: BackendConfig = Field(
        default_factory=BackendConfig,
        description="Generative backend configuration"
    )
    quiz: QuizConfig = Field(
        default_factory=QuizConfig,
        description="Assessment generation settings"
    )
    journal: JournalConfig = Field(
        default_factory=JournalConfig,
        description="Structured event journal"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )

    @field_validator('backend', mode='before')
    @classmethod
    def validate_backend(cls, v: Union[str, dict, BackendConfig]) -> Union[dict, BackendConfig]:
        """Convert string backend name to BackendConfig."""
        if isinstance(v, str):
            return {"name": v}
        return v
