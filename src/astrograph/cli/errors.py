"""
Standardized error handling and exit codes for the astrograph CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

from rich.console import Console

from astrograph.core.errors import GenerationError, GenerationFailure, StateError

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for astrograph CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error (backend failure, unexpected state)."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
    doc_url: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it
        doc_url: Optional documentation URL for more help

    Example:
        >>> print_error(
        ...     "No API key found",
        ...     reason="Astrograph needs a Gemini API key to analyze dossiers",
        ...     solution="export GEMINI_API_KEY=...",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")

    if doc_url:
        console.print(f"[dim]Docs: {doc_url}[/dim]")


def print_missing_api_key_error(detail: str) -> None:
    """Print error when no API key is configured."""
    print_error(
        "No API key found",
        reason=detail,
        solution="export GEMINI_API_KEY=...  # or add it to .env",
        doc_url="https://ai.google.dev/gemini-api/docs/api-key",
    )


def print_configuration_error(detail: str) -> None:
    """Print error when the configuration cannot be loaded."""
    print_error(
        "Invalid configuration",
        reason=detail,
        solution="astrograph config  # to inspect the effective settings",
    )


def print_generation_error(error: GenerationError) -> None:
    """Print error when a backend call fails."""
    reasons = {
        GenerationFailure.TRANSPORT: "The generative backend could not be reached",
        GenerationFailure.PARSE: "The model returned text that is not valid JSON",
        GenerationFailure.SCHEMA: "The model returned JSON in an unexpected shape",
    }
    print_error(
        f"Signal lost during {error.kind.value.replace('_', ' ')}",
        reason=f"{reasons[error.reason]}: {error.cause}",
        solution="Retry the same action; nothing was changed",
    )


def print_state_error(error: StateError) -> None:
    """Print error when an action is not available in the current stage."""
    print_error(
        f"Cannot {error.operation} right now",
        reason=f"Current stage is {error.stage}: {error.message}",
    )


def print_invalid_input_error(field: str, message: str) -> None:
    """Print error when user input fails validation."""
    print_error(f"Invalid {field}", reason=message)


__all__ = [
    "ExitCode",
    "console",
    "print_configuration_error",
    "print_error",
    "print_generation_error",
    "print_invalid_input_error",
    "print_missing_api_key_error",
    "print_state_error",
]
