"""`linear team` commands."""

from __future__ import annotations

import typer

from ..errors import NotFoundError
from ..models import Connection, LinearModel, Team
from ..output import Renderer
from .base import GraphQLExecutor, require, run_handler

app = typer.Typer(help="Team operations.", no_args_is_help=True)

TEAMS_QUERY = """
query Teams {
    teams {
        nodes {
            id
            key
            name
            description
        }
    }
}
"""

TEAM_QUERY = """
query Team($id: String!) {
    team(id: $id) {
        id
        key
        name
        description
    }
}
"""

TEAM_BY_KEY_QUERY = """
query TeamByKey($key: String!) {
    teams(filter: { key: { eqIgnoreCase: $key } }) {
        nodes {
            id
            key
            name
        }
    }
}
"""


class TeamsResponse(LinearModel):
    teams: Connection[Team]


class TeamResponse(LinearModel):
    team: Team | None = None


class _TeamRef(LinearModel):
    id: str
    key: str
    name: str


class TeamLookupResponse(LinearModel):
    teams: Connection[_TeamRef]


async def resolve_team_id(client: GraphQLExecutor, key: str) -> str:
    """Mutations want the team's id; users type its key."""
    response = await client.fetch(TeamLookupResponse, TEAM_BY_KEY_QUERY, {"key": key})
    if not response.teams.nodes:
        raise NotFoundError(f"team '{key}'")
    return response.teams.nodes[0].id


async def handle_list(client: GraphQLExecutor, renderer: Renderer, options: None = None) -> None:
    response = await client.fetch(TeamsResponse, TEAMS_QUERY, {})
    renderer.teams(response.teams.nodes)


async def handle_get(client: GraphQLExecutor, renderer: Renderer, key: str) -> None:
    response = await client.fetch(TeamResponse, TEAM_QUERY, {"id": key})
    renderer.team_detail(require(response.team, f"team {key}"))


@app.command("list")
def list_teams(ctx: typer.Context) -> None:
    """List all teams."""
    run_handler(ctx, handle_list, None)


@app.command("get")
def get_team(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Team key or ID (e.g. ENG)."),
) -> None:
    """Show team details."""
    run_handler(ctx, handle_get, key)
