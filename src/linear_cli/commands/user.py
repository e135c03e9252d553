"""`linear user` commands."""

from __future__ import annotations

import typer

from ..models import LinearModel, Viewer
from ..output import Renderer
from .base import GraphQLExecutor, run_handler

app = typer.Typer(help="User operations.", no_args_is_help=True)

VIEWER_QUERY = """
query Viewer {
    viewer {
        id
        name
        email
    }
}
"""


class ViewerResponse(LinearModel):
    viewer: Viewer


async def handle_me(client: GraphQLExecutor, renderer: Renderer, options: None = None) -> None:
    response = await client.fetch(ViewerResponse, VIEWER_QUERY, {})
    renderer.user(response.viewer)


@app.command("me")
def me(ctx: typer.Context) -> None:
    """Show the currently authenticated user."""
    run_handler(ctx, handle_me, None)
