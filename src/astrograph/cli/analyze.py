"""
Astrograph CLI - One-shot analysis.

Analyzes a dossier and prints the resulting profile without entering the
interactive session.
"""

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from astrograph.cli.errors import ExitCode, print_generation_error, print_invalid_input_error
from astrograph.cli.render import SessionRenderer
from astrograph.cli.session import build_machine_or_exit, load_image_or_exit
from astrograph.core.errors import GenerationError, ValidationError

console = Console()


def analyze(
    text: str = typer.Argument("", help="Dossier text (resume, portfolio notes or vision)"),
    image: Path | None = typer.Option(
        None,
        "--image",
        "-i",
        help="Image of a resume or portfolio",
        exists=True,
        dir_okay=False,
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model identifier to use instead of the configured one",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the profile as JSON",
    ),
) -> None:
    """
    Analyze a dossier and print its constellation profile.

    Examples:
        astrograph analyze "Senior backend engineer, 8 years of Go"
        astrograph analyze --image resume.png
        astrograph analyze "Product designer moving into research" --json
    """
    machine = build_machine_or_exit(model)
    attachment = load_image_or_exit(image)

    try:
        profile = asyncio.run(machine.analyzer.analyze(text, attachment))
    except ValidationError as e:
        print_invalid_input_error(e.field, e.message)
        raise typer.Exit(ExitCode.USER_ERROR)
    except GenerationError as e:
        print_generation_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if json_output:
        console.print_json(profile.model_dump_json())
        return

    console.print(SessionRenderer(console).render_profile(profile))
