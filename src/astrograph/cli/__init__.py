"""
Astrograph CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import os
import sys

import typer
from rich.console import Console
from rich.table import Table

from astrograph import __version__
from astrograph.cli import analyze, session
from astrograph.cli.errors import ExitCode, print_configuration_error
from astrograph.core.config import load_config, load_layered_env
from astrograph.core.errors import ConfigurationError

# Help panel names for command grouping
PANEL_KEY = "Key Commands"
PANEL_INSTALL = "Manage Your Installation"

# Create the main Typer app
app = typer.Typer(
    name="astrograph",
    help="Chart your career constellation",
    no_args_is_help=False,
    invoke_without_command=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure stdlib logging for the process.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    Astrograph - career discovery in the terminal.

    Submit a dossier (resume, portfolio notes or career vision), take a short
    aptitude assessment and receive a five-phase ascension roadmap.

    Quick Start:
        1. export GEMINI_API_KEY=...
        2. astrograph                 # Start an interactive session

    Common Workflows:
        astrograph run --text "Senior backend engineer, 8 years of Go"
        astrograph analyze "Designer moving into research" --json
        astrograph config             # Show effective configuration
    """
    setup_logging(debug)
    # Before any command runs so API keys from .env files are visible.
    env_sources = load_layered_env()

    ctx.obj = {"debug": debug, "env_sources": env_sources}

    if ctx.invoked_subcommand is not None:
        return

    # Bare `astrograph` behaves like `astrograph run`
    session.start_session(text=None, image=None, model=None)


# =============================================================================
# Key Commands
# =============================================================================

app.command(name="run", rich_help_panel=PANEL_KEY)(session.run)
app.command(name="analyze", rich_help_panel=PANEL_KEY)(analyze.analyze)


# =============================================================================
# Manage Your Installation
# =============================================================================


@app.command(rich_help_panel=PANEL_INSTALL)
def config(ctx: typer.Context) -> None:
    """Show the effective configuration (API key redacted)."""
    env_sources = (ctx.obj or {}).get("env_sources", {})
    try:
        cfg = load_config()
    except ConfigurationError as e:
        print_configuration_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    table = Table(title="Astrograph Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("backend.name", cfg.backend.name)
    table.add_row("backend.model", cfg.backend.model)
    table.add_row(
        "backend.timeout_seconds",
        str(cfg.backend.timeout_seconds) if cfg.backend.timeout_seconds else "default",
    )
    for name in cfg.backend.api_key_env:
        if name in env_sources:
            state = f"[green]set[/green] [dim](from {env_sources[name]})[/dim]"
        elif os.environ.get(name):
            state = "[green]set[/green] [dim](environment)[/dim]"
        else:
            state = "[dim]unset[/dim]"
        table.add_row(f"env.{name}", state)
    table.add_row("quiz.question_count", str(cfg.quiz.question_count))
    table.add_row("journal.enabled", str(cfg.journal.enabled))
    table.add_row("journal.directory", cfg.journal.directory or "default")

    console.print(table)


@app.command(rich_help_panel=PANEL_INSTALL)
def version() -> None:
    """Show astrograph version and exit."""
    console.print(f"astrograph version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
