"""`linear label` commands."""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import Field

from ..models import Connection, Label, LinearModel
from ..output import Renderer
from .base import GraphQLExecutor, JsonDict, run_handler

app = typer.Typer(help="Label operations.", no_args_is_help=True)

LABELS_QUERY = """
query Labels($filter: IssueLabelFilter) {
    issueLabels(filter: $filter) {
        nodes {
            id
            name
            color
        }
    }
}
"""


class LabelsResponse(LinearModel):
    issue_labels: Connection[Label] = Field(alias="issueLabels")


def build_label_filter(team: str | None) -> JsonDict:
    label_filter: JsonDict = {}
    if team is not None:
        label_filter["team"] = {"key": {"eq": team}}
    return label_filter


async def handle_list(client: GraphQLExecutor, renderer: Renderer, team: str | None) -> None:
    response = await client.fetch(LabelsResponse, LABELS_QUERY, {"filter": build_label_filter(team)})
    renderer.labels(response.issue_labels.nodes)


@app.command("list")
def list_labels(
    ctx: typer.Context,
    team: Optional[str] = typer.Option(None, help="Filter by team key."),
) -> None:
    """List issue labels."""
    run_handler(ctx, handle_list, team)
