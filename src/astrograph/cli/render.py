"""
Rich-based renderer for astrograph sessions.

Turns a SessionSnapshot into panels: navigation log, constellation profile,
the current assessment question and the roadmap star chart.
"""

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from astrograph.core.navlog.models import LogEntry, LogSource
from astrograph.core.profile.models import Profile, RiskLevel
from astrograph.core.quiz.models import QuizSession
from astrograph.core.roadmap.chart import project
from astrograph.core.roadmap.models import ASCENSION_PHASES
from astrograph.core.stage.models import SessionSnapshot, Stage

OPTION_LETTERS = "ABCD"
CHART_COLUMNS = 48
CHART_ROWS = 14
LOG_TAIL = 8

SOURCE_STYLES = {
    LogSource.SYSTEM: "cyan",
    LogSource.ANALYZER: "magenta",
    LogSource.QUIZ: "yellow",
}

RISK_STYLES = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
}


class SessionRenderer:
    """
    Render a discovery session using Rich.

    Example:
        >>> renderer = SessionRenderer()
        >>> renderer.show(machine.snapshot())
    """

    def __init__(self, console: Console | None = None):
        """
        Args:
            console: Rich console for rendering. If None, creates a new one.
        """
        self.console = console or Console()

    def show(self, snapshot: SessionSnapshot) -> None:
        self.console.print(self.render(snapshot))

    def render(self, snapshot: SessionSnapshot) -> RenderableType:
        """Render every panel relevant to the snapshot's stage."""
        parts: list[RenderableType] = [self.render_log(snapshot.log)]

        if snapshot.profile is not None:
            parts.append(self.render_profile(snapshot.profile))

        if snapshot.stage == Stage.ASSESSMENT and snapshot.quiz_session is not None:
            parts.append(self.render_question(snapshot.quiz_session))

        if snapshot.stage == Stage.ROADMAP:
            parts.append(self.render_roadmap(snapshot))

        return Group(*parts)

    def render_log(self, entries: tuple[LogEntry, ...]) -> Panel:
        """Render the most recent navigation log entries."""
        table = Table.grid(padding=(0, 1))
        table.add_column(style="dim", no_wrap=True)
        table.add_column(no_wrap=True)
        table.add_column()

        for entry in entries[-LOG_TAIL:]:
            style = SOURCE_STYLES.get(entry.source, "white")
            table.add_row(
                entry.timestamp.strftime("%H:%M:%S"),
                Text(f"[{entry.source.value}]", style=style),
                entry.message,
            )

        return Panel(table, title="[bold]Navigation Log[/bold]", border_style="blue")

    def render_profile(self, profile: Profile) -> Panel:
        """Render the analyzed constellation profile."""
        content = Table.grid(padding=(0, 2))
        content.add_column(style="bold cyan", justify="right")
        content.add_column()

        risk_style = RISK_STYLES.get(profile.risk_level, "white")
        content.add_row("Constellation:", Text(profile.archetype_name, style="bold"))
        content.add_row("Threat level:", Text(profile.risk_level.value, style=risk_style))
        content.add_row("Summary:", profile.summary)

        return Panel(content, title="[bold]Constellation[/bold]", border_style="magenta")

    def render_question(self, session: QuizSession) -> Panel:
        """Render the question awaiting an answer."""
        question = session.current_question
        if question is None:
            body: RenderableType = Text(
                f"Assessment complete: {session.score}/{session.total}", style="bold green"
            )
        else:
            lines = [Text(question.prompt, style="bold"), Text("")]
            for letter, option in zip(OPTION_LETTERS, question.options):
                lines.append(Text(f"  {letter}) {option}"))
            body = Group(*lines)

        title = f"[bold]Assessment {min(session.current_index + 1, session.total)}/{session.total}[/bold]"
        return Panel(body, title=title, subtitle=f"score {session.score}", border_style="yellow")

    def render_chart(self, snapshot: SessionSnapshot) -> Text:
        """
        Plot the trajectory on a character grid.

        Milestones are drawn as their index (1-5); the active one is
        highlighted.
        """
        grid = [[" "] * CHART_COLUMNS for _ in range(CHART_ROWS)]
        cells: list[tuple[int, int]] = []
        if snapshot.profile is not None:
            for number, coord in enumerate(snapshot.profile.trajectory, start=1):
                col, row = project(coord, CHART_COLUMNS, CHART_ROWS)
                grid[row][col] = str(number)
                cells.append((col, row))

        active = cells[snapshot.roadmap_step_index] if cells else None
        text = Text()
        for row_idx, row in enumerate(grid):
            for col_idx, char in enumerate(row):
                if (col_idx, row_idx) == active:
                    text.append(char, style="bold reverse yellow")
                elif char != " ":
                    text.append(char, style="bold cyan")
                else:
                    text.append("·" if (row_idx + col_idx) % 7 == 0 else " ", style="dim")
            text.append("\n")
        return text

    def render_roadmap(self, snapshot: SessionSnapshot) -> Panel:
        """Render the star chart and the active roadmap step."""
        index = snapshot.roadmap_step_index
        milestones = Text()
        for i, name in enumerate(ASCENSION_PHASES):
            style = "bold reverse yellow" if i == index else "dim"
            milestones.append(f" {i + 1}. {name} ", style=style)

        parts: list[RenderableType] = [self.render_chart(snapshot), milestones]
        step = snapshot.current_step
        if step is not None:
            detail = Table.grid(padding=(0, 2))
            detail.add_column(style="bold cyan", justify="right")
            detail.add_column()
            detail.add_row("Phase:", step.phase)
            detail.add_row("Action:", step.instruction)
            detail.add_row("Objective:", step.objective)
            parts.extend([Text(""), detail])

        return Panel(
            Group(*parts),
            title=f"[bold]Ascension Plan: {snapshot.current_milestone or ASCENSION_PHASES[0]}[/bold]",
            border_style="cyan",
        )
