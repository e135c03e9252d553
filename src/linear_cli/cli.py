"""Command-line interface for Linear."""

from __future__ import annotations

import logging

import anyio
import httpx
import typer
from pydantic import ValidationError

from . import __version__
from .commands import comment, cycle, document, issue, label, project, search, team, user, workflow
from .commands.base import CommandContext, reported_errors, run_handler
from .output import Renderer
from .settings import LinearAPIConfig
from .updater import self_update

app = typer.Typer(help="A CLI for Linear.", no_args_is_help=True)

app.add_typer(user.app, name="user")
app.add_typer(issue.app, name="issue")
app.add_typer(team.app, name="team")
app.add_typer(project.app, name="project")
app.add_typer(cycle.app, name="cycle")
app.add_typer(label.app, name="label")
app.add_typer(workflow.app, name="workflow")
app.add_typer(comment.app, name="comment")
app.add_typer(document.app, name="document")

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"linear {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    ctx: typer.Context,
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests to stderr."),
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    """A CLI for Linear."""
    setup_logging(verbose)

    # Tests hand in a prepared context carrying config and a fake transport.
    provided = ctx.obj if isinstance(ctx.obj, CommandContext) else None
    if provided is not None:
        config = provided.config
    else:
        try:
            config = LinearAPIConfig()
        except ValidationError as exc:
            typer.secho(f"Failed to load configuration: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

    ctx.obj = CommandContext(
        config=config,
        renderer=Renderer.create(no_color=no_color),
        transport=provided.transport if provided is not None else None,
    )


@app.command("search")
def search_issues(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query."),
    limit: int = typer.Option(search.DEFAULT_LIMIT, "--limit", "-n", min=1, help="Maximum results."),
) -> None:
    """Search issues."""
    run_handler(ctx, search.handle_search, search.SearchOptions(query=query, limit=limit))


@app.command("update")
def update(ctx: typer.Context) -> None:
    """Update linear to the latest release."""
    state: CommandContext = ctx.obj

    async def _run() -> None:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(state.config.http_timeout),
            transport=state.transport,
        ) as client:
            await self_update(
                client,
                current_version=__version__,
                release_url=state.config.release_url,
                report=state.renderer.message,
            )

    with reported_errors(state.renderer):
        anyio.run(_run)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
