"""`linear cycle` commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from ..models import Connection, Cycle, CycleDetail, LinearModel
from ..output import Renderer
from .base import GraphQLExecutor, JsonDict, require, run_handler

app = typer.Typer(help="Cycle operations.", no_args_is_help=True)

DEFAULT_LIMIT = 10

CYCLES_QUERY = """
query Cycles($first: Int, $filter: CycleFilter) {
    cycles(first: $first, filter: $filter) {
        nodes {
            id
            number
            name
            startsAt
            endsAt
            progress
        }
    }
}
"""

CYCLE_QUERY = """
query Cycle($id: String!) {
    cycle(id: $id) {
        id
        number
        name
        startsAt
        endsAt
        progress
        description
    }
}
"""


@dataclass(slots=True)
class ListCycleOptions:
    team: str | None = None
    limit: int = DEFAULT_LIMIT


class CyclesResponse(LinearModel):
    cycles: Connection[Cycle]


class CycleResponse(LinearModel):
    cycle: CycleDetail | None = None


def build_cycle_filter(options: ListCycleOptions) -> JsonDict:
    cycle_filter: JsonDict = {}
    if options.team is not None:
        cycle_filter["team"] = {"key": {"eq": options.team}}
    return cycle_filter


async def handle_list(client: GraphQLExecutor, renderer: Renderer, options: ListCycleOptions) -> None:
    variables = {"first": options.limit, "filter": build_cycle_filter(options)}
    response = await client.fetch(CyclesResponse, CYCLES_QUERY, variables)
    renderer.cycles(response.cycles.nodes)


async def handle_get(client: GraphQLExecutor, renderer: Renderer, cycle_id: str) -> None:
    response = await client.fetch(CycleResponse, CYCLE_QUERY, {"id": cycle_id})
    renderer.cycle_detail(require(response.cycle, f"cycle {cycle_id}"))


@app.command("list")
def list_cycles(
    ctx: typer.Context,
    team: Optional[str] = typer.Option(None, help="Filter by team key."),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-n", min=1, help="Maximum number to show."),
) -> None:
    """List cycles."""
    run_handler(ctx, handle_list, ListCycleOptions(team=team, limit=limit))


@app.command("get")
def get_cycle(
    ctx: typer.Context,
    cycle_id: str = typer.Argument(..., metavar="ID", help="Cycle ID."),
) -> None:
    """Show cycle details."""
    run_handler(ctx, handle_get, cycle_id)
