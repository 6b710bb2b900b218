"""
Astrograph CLI - Interactive session.

Drives a StageMachine from the terminal: reads a dossier, serves the
assessment one question at a time and lets the user walk the roadmap.
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

import typer
from rich.console import Console

from astrograph.cli.errors import (
    ExitCode,
    print_configuration_error,
    print_error,
    print_generation_error,
    print_invalid_input_error,
    print_missing_api_key_error,
    print_state_error,
)
from astrograph.cli.render import OPTION_LETTERS, SessionRenderer
from astrograph.core.config import load_config, resolve_api_key
from astrograph.core.errors import (
    ConfigurationError,
    GenerationError,
    StateError,
    ValidationError,
)
from astrograph.core.generative.models import ImageAttachment
from astrograph.core.stage import Stage, StageMachine, build_machine

logger = logging.getLogger(__name__)

console = Console()

Prompt = Callable[[str], str]

KEY_HELP = {
    Stage.INTAKE: "Enter your dossier (q to quit)",
    Stage.ANALYSIS: "[c] resume assessment  [r] reset  [q] quit",
    Stage.ASSESSMENT: "[A-D] answer  [r] reset  [q] quit",
    Stage.ROADMAP: "[n] next  [p] previous  [r] reset  [q] quit",
}
RETRY_ROADMAP_HELP = "[c] chart roadmap  [r] reset  [q] quit"


def build_machine_or_exit(model: str | None = None) -> StageMachine:
    """
    Load configuration and build a machine, exiting with USER_ERROR on failure.

    Args:
        model: Optional model override for this session
    """
    try:
        config = load_config()
    except ConfigurationError as e:
        print_configuration_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    if model:
        config = config.model_copy(deep=True)
        config.backend.model = model

    try:
        resolve_api_key(config)
    except ConfigurationError as e:
        print_missing_api_key_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    try:
        return build_machine(config)
    except ConfigurationError as e:
        print_configuration_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)


def load_image_or_exit(image: Path | None) -> ImageAttachment | None:
    if image is None:
        return None
    try:
        return ImageAttachment.from_path(image)
    except (OSError, ValueError) as e:
        print_error(f"Cannot read image: {image}", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR)


def _prompt_label(machine: StageMachine) -> str:
    state = machine.state
    if state.stage == Stage.ASSESSMENT and state.quiz_session.is_terminal:
        return RETRY_ROADMAP_HELP
    return KEY_HELP[state.stage]


async def dispatch(machine: StageMachine, key: str) -> bool:
    """
    Apply one keypress to the machine.

    Returns:
        False when the user asked to quit, True otherwise

    Raises:
        ValidationError, StateError, GenerationError: From the intent invoked
    """
    key = key.strip()
    lowered = key.lower()
    stage = machine.state.stage

    if lowered == "q":
        return False
    if lowered == "r" and stage != Stage.INTAKE:
        machine.reset()
        return True

    if stage == Stage.ANALYSIS and lowered == "c":
        with console.status("Generating assessment..."):
            await machine.start_assessment()
    elif stage == Stage.ASSESSMENT and machine.state.quiz_session.is_terminal:
        # A finished quiz still in ASSESSMENT means the roadmap call failed
        if lowered != "c":
            console.print(f"[yellow]Unrecognized key:[/yellow] {key!r}")
            return True
        with console.status("Charting ascension plan..."):
            await machine.chart_roadmap()
    elif stage == Stage.ASSESSMENT and len(key) == 1 and key.upper() in OPTION_LETTERS:
        with console.status("Aligning aptitude..."):
            await machine.answer_question(OPTION_LETTERS.index(key.upper()))
    elif stage == Stage.ROADMAP and lowered == "n":
        machine.advance_roadmap()
    elif stage == Stage.ROADMAP and lowered == "p":
        machine.retreat_roadmap()
    else:
        console.print(f"[yellow]Unrecognized key:[/yellow] {key!r}")
    return True


async def submit(machine: StageMachine, text: str, image: ImageAttachment | None) -> None:
    with console.status("Scanning dossier..."):
        await machine.submit_dossier(text, image)


async def drive(
    machine: StageMachine,
    renderer: SessionRenderer,
    text: str | None = None,
    image: ImageAttachment | None = None,
    prompt: Prompt = typer.prompt,
) -> None:
    """
    Run the interactive loop until the user quits.

    An initial dossier (text and/or image) is submitted without prompting.
    Intent errors are reported and the loop continues, so any failed step
    can be retried.
    """
    pending_dossier = (text or "", image) if (text or image) else None

    while True:
        renderer.show(machine.snapshot())
        try:
            if machine.state.stage == Stage.INTAKE:
                if pending_dossier is not None:
                    dossier, attachment = pending_dossier
                    pending_dossier = None
                else:
                    dossier = prompt(_prompt_label(machine))
                    attachment = None
                    command = dossier.strip().lower()
                    if command == "q":
                        return
                    if command == "r":
                        console.print("[dim]Nothing to reset; awaiting a dossier.[/dim]")
                        continue
                await submit(machine, dossier, attachment)
                continue

            if not await dispatch(machine, prompt(_prompt_label(machine))):
                return
        except ValidationError as e:
            print_invalid_input_error(e.field, e.message)
        except StateError as e:
            print_state_error(e)
        except GenerationError as e:
            print_generation_error(e)


def start_session(text: str | None, image: Path | None, model: str | None) -> None:
    """Build a machine and hand the terminal to the interactive loop."""
    machine = build_machine_or_exit(model)
    attachment = load_image_or_exit(image)
    renderer = SessionRenderer(console)

    try:
        asyncio.run(drive(machine, renderer, text, attachment))
    except KeyboardInterrupt:
        console.print("\n[dim]Transmission ended.[/dim]")
        raise typer.Exit(ExitCode.SIGINT)

    usage = machine.analyzer.client.usage
    logger.debug("Session used %d tokens", usage.total_tokens)


def run(
    text: str | None = typer.Option(
        None,
        "--text",
        "-t",
        help="Dossier text to submit immediately (resume, portfolio notes or vision)",
    ),
    image: Path | None = typer.Option(
        None,
        "--image",
        "-i",
        help="Image of a resume or portfolio to attach to the dossier",
        exists=True,
        dir_okay=False,
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model identifier to use instead of the configured one",
    ),
) -> None:
    """
    Start an interactive discovery session.

    Walks through intake, analysis, assessment and the ascension roadmap.

    Examples:
        astrograph run
        astrograph run --text "Senior backend engineer, 8 years of Go"
        astrograph run --image resume.png --model gemini-2.5-flash
    """
    start_session(text, image, model)
