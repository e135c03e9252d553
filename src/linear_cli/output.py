"""Human-readable rendering of Linear entities."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Mapping, Sequence
from typing import IO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .errors import LinearError
from .models import (
    Comment,
    Cycle,
    CycleDetail,
    Document,
    DocumentDetail,
    Issue,
    IssueDetail,
    Label,
    Project,
    ProjectDetail,
    SearchResult,
    Team,
    Viewer,
    WorkflowState,
)

TITLE_BUDGET = 40
ELLIPSIS = "…"
MISSING = "-"
PLACEHOLDER = "—"
UNKNOWN_PRIORITY = PLACEHOLDER

PRIORITY_LABELS = {
    0: "None",
    1: "Urgent",
    2: "High",
    3: "Normal",
    4: "Low",
}

# Display order for workflow state categories; other types are not shown.
STATE_TYPE_ORDER = ("backlog", "unstarted", "started", "completed", "canceled")

# Piped output is never cropped to a guessed terminal width.
PIPE_WIDTH = 10_000

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def truncate(text: str, budget: int = TITLE_BUDGET) -> str:
    """Shorten ``text`` to ``budget`` characters, ending in an ellipsis."""
    if len(text) <= budget:
        return text
    return text[: max(budget - 1, 0)] + ELLIPSIS


def priority_label(priority: int) -> str:
    return PRIORITY_LABELS.get(priority, UNKNOWN_PRIORITY)


def short_date(timestamp: str) -> str:
    """``2024-05-01T10:00:00.000Z`` -> ``2024-05-01``."""
    return timestamp[:10]


def percent(progress: float) -> str:
    return f"{progress * 100:.0f}%"


def color_enabled(
    no_color: bool, stream: IO[str], environ: Mapping[str, str] | None = None
) -> bool:
    """Decide whether ``stream`` gets ANSI styling.

    Styling is off when the caller asked for no color, when ``NO_COLOR`` is set
    to a non-empty value, or when ``stream`` is not an interactive terminal.
    """
    env = os.environ if environ is None else environ
    if no_color or env.get("NO_COLOR"):
        return False
    return _is_terminal(stream)


def _is_terminal(stream: IO[str]) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def make_console(stream: IO[str], *, color: bool, width: int | None = None) -> Console:
    if width is None and not _is_terminal(stream):
        width = PIPE_WIDTH
    return Console(
        file=stream,
        color_system="auto" if color else None,
        force_terminal=color,
        no_color=not color,
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
        width=width,
    )


class Renderer:
    """Formats results on ``console`` and failures on ``err_console``."""

    def __init__(self, console: Console, err_console: Console) -> None:
        self.console = console
        self.err_console = err_console

    @classmethod
    def create(
        cls,
        *,
        no_color: bool = False,
        stdout: IO[str] | None = None,
        stderr: IO[str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Renderer":
        out = stdout or sys.stdout
        err = stderr or sys.stderr
        return cls(
            make_console(out, color=color_enabled(no_color, out, environ)),
            make_console(err, color=color_enabled(no_color, err, environ)),
        )

    # -- generic -----------------------------------------------------------

    def message(self, text: str) -> None:
        self.console.print(text)

    def error(self, exc: LinearError) -> None:
        self.err_console.print(Text.assemble((exc.label, "bold red"), f": {exc}"))

    def _field(self, label: str, value: str) -> None:
        self.console.print(Text.assemble((label, "dim"), f": {value}"))

    def _description(self, description: str | None) -> None:
        if description:
            self.console.print()
            self.console.print(description)

    def _empty(self, items: Sequence[object], noun: str) -> bool:
        if items:
            return False
        self.console.print(f"No {noun} found.")
        return True

    # -- users -------------------------------------------------------------

    def user(self, viewer: Viewer) -> None:
        self.console.print(Text.assemble(("Name", "bold"), f": {viewer.name}"))
        self.console.print(Text.assemble(("Email", "bold"), f": {viewer.email}"))
        self.console.print(Text.assemble(("ID", "bold dim"), ": ", (viewer.id, "dim")))

    # -- issues ------------------------------------------------------------

    def issues(self, issues: Sequence[Issue]) -> None:
        if self._empty(issues, "issues"):
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title", no_wrap=True)
        table.add_column("State", no_wrap=True)
        table.add_column("Assignee", no_wrap=True)
        table.add_column("Priority", no_wrap=True)

        for issue in issues:
            table.add_row(
                issue.identifier,
                truncate(issue.title),
                issue.state.name if issue.state else MISSING,
                issue.assignee.name if issue.assignee else MISSING,
                priority_label(issue.priority),
            )
        self.console.print(table)

    def issue_detail(self, issue: IssueDetail) -> None:
        self.console.print(
            Text.assemble((issue.identifier, "bold cyan"), " ", (issue.title, "bold"))
        )
        self.console.print()
        self._field("Team", f"{issue.team.name} ({issue.team.key})")
        self._field("State", issue.state.name if issue.state else PLACEHOLDER)
        self._field("Assignee", issue.assignee.name if issue.assignee else PLACEHOLDER)
        self._field("Priority", priority_label(issue.priority))
        self._field("Created", short_date(issue.created_at))
        self._field("Updated", short_date(issue.updated_at))
        if issue.url:
            self._field("URL", issue.url)

        if issue.description:
            self.console.print()
            self.console.print(Text("Description:", style="dim"))
            self.console.print(issue.description)

    def issue_saved(self, verb: str, identifier: str, title: str, url: str | None) -> None:
        self.console.print(Text.assemble(f"{verb} issue ", (identifier, "bold cyan"), f": {title}"))
        if url:
            self.console.print(url)

    # -- teams -------------------------------------------------------------

    def teams(self, teams: Sequence[Team]) -> None:
        if self._empty(teams, "teams"):
            return
        for team in teams:
            self.console.print(Text.assemble((team.key, "bold cyan"), f" - {team.name}"))

    def team_detail(self, team: Team) -> None:
        self.console.print(Text.assemble((team.key, "bold cyan"), " ", (team.name, "bold")))
        self._description(team.description)

    # -- projects ----------------------------------------------------------

    def projects(self, projects: Sequence[Project]) -> None:
        if self._empty(projects, "projects"):
            return
        for project in projects:
            self.console.print(
                Text.assemble(
                    (project.name, "bold"),
                    f" [{project.state}] ",
                    (percent(project.progress), "dim"),
                )
            )

    def project_detail(self, project: ProjectDetail) -> None:
        self.console.print(Text(project.name, style="bold"))
        self.console.print()
        self._field("State", project.state)
        self._field("Progress", percent(project.progress))
        if project.start_date:
            self._field("Start", short_date(project.start_date))
        if project.target_date:
            self._field("Target", short_date(project.target_date))
        self._description(project.description)

    # -- cycles ------------------------------------------------------------

    def cycles(self, cycles: Sequence[Cycle]) -> None:
        if self._empty(cycles, "cycles"):
            return
        for cycle in cycles:
            dates = f"{short_date(cycle.starts_at)} → {short_date(cycle.ends_at)}"
            self.console.print(
                Text.assemble(
                    "Cycle ",
                    (str(cycle.number), "bold cyan"),
                    f" {cycle.name or ''} ",
                    (dates, "dim"),
                    " ",
                    (percent(cycle.progress), "dim"),
                )
            )

    def cycle_detail(self, cycle: CycleDetail) -> None:
        self.console.print(
            Text.assemble("Cycle ", (str(cycle.number), "bold cyan"), " ", (cycle.name or "", "bold"))
        )
        self.console.print()
        self._field("Period", f"{short_date(cycle.starts_at)} → {short_date(cycle.ends_at)}")
        self._field("Progress", percent(cycle.progress))
        self._description(cycle.description)

    # -- labels and workflow states ----------------------------------------

    def labels(self, labels: Sequence[Label]) -> None:
        if self._empty(labels, "labels"):
            return
        for label in labels:
            swatch = label.color if _HEX_COLOR.match(label.color) else ""
            self.console.print(Text.assemble(("●", swatch), f" {label.name}"))

    def workflow_states(self, states: Sequence[WorkflowState]) -> None:
        if self._empty(states, "workflow states"):
            return
        for state_type in STATE_TYPE_ORDER:
            matching = [state for state in states if state.type == state_type]
            if not matching:
                continue
            self.console.print(Text(f"{state_type.upper()}:", style="bold"))
            for state in matching:
                self.console.print(f"  {state.name}")

    # -- comments and documents --------------------------------------------

    def comments(self, comments: Sequence[Comment]) -> None:
        if self._empty(comments, "comments"):
            return
        for index, comment in enumerate(comments):
            if index:
                self.console.print()
            author = comment.user.name if comment.user else "Unknown"
            self.console.print(
                Text.assemble((author, "bold"), " ", (short_date(comment.created_at), "dim"))
            )
            self.console.print(comment.body)

    def documents(self, documents: Sequence[Document]) -> None:
        if self._empty(documents, "documents"):
            return
        for document in documents:
            self.console.print(
                Text.assemble(
                    (document.title, "bold"),
                    " ",
                    (f"(updated {short_date(document.updated_at)})", "dim"),
                )
            )

    def document_detail(self, document: DocumentDetail) -> None:
        self.console.print(Text(document.title, style="bold"))
        self.console.print()
        self._field("Created", short_date(document.created_at))
        self._field("Updated", short_date(document.updated_at))
        self._description(document.content)

    # -- search ------------------------------------------------------------

    def search_results(self, results: Sequence[SearchResult]) -> None:
        if self._empty(results, "issues"):
            return
        for result in results:
            state = result.state.name if result.state else MISSING
            self.console.print(
                Text.assemble(
                    (result.identifier, "bold cyan"),
                    f" {truncate(result.title)} ",
                    (f"[{state}]", "dim"),
                )
            )
