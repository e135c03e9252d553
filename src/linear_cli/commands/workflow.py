"""`linear workflow` commands."""

from __future__ import annotations

import typer

from ..models import Connection, LinearModel, WorkflowState
from ..output import Renderer
from .base import GraphQLExecutor, require, run_handler

app = typer.Typer(help="Workflow operations.", no_args_is_help=True)

WORKFLOW_STATES_QUERY = """
query WorkflowStates($teamId: String!) {
    team(id: $teamId) {
        states {
            nodes {
                id
                name
                type
                color
                position
            }
        }
    }
}
"""


class _TeamStates(LinearModel):
    states: Connection[WorkflowState]


class WorkflowStatesResponse(LinearModel):
    team: _TeamStates | None = None


async def handle_list(client: GraphQLExecutor, renderer: Renderer, team: str) -> None:
    response = await client.fetch(WorkflowStatesResponse, WORKFLOW_STATES_QUERY, {"teamId": team})
    states = require(response.team, f"team {team}").states.nodes
    renderer.workflow_states(sorted(states, key=lambda state: state.position))


@app.command("list")
def list_states(
    ctx: typer.Context,
    team: str = typer.Option(..., help="Team key or ID."),
) -> None:
    """List workflow states for a team."""
    run_handler(ctx, handle_list, team)
