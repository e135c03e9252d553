"""`linear project` commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer
from pydantic import Field

from ..models import Connection, CreatedProject, LinearModel, MutationPayload, Project, ProjectDetail
from ..output import Renderer
from .base import GraphQLExecutor, JsonDict, ensure_success, put, require, returned, run_handler
from .team import resolve_team_id

app = typer.Typer(help="Project operations.", no_args_is_help=True)

DEFAULT_LIMIT = 25

PROJECTS_QUERY = """
query Projects($first: Int, $filter: ProjectFilter) {
    projects(first: $first, filter: $filter) {
        nodes {
            id
            name
            state
            progress
            startDate
            targetDate
        }
    }
}
"""

PROJECT_QUERY = """
query Project($id: String!) {
    project(id: $id) {
        id
        name
        description
        state
        progress
        startDate
        targetDate
    }
}
"""

CREATE_PROJECT_MUTATION = """
mutation CreateProject($input: ProjectCreateInput!) {
    projectCreate(input: $input) {
        success
        project {
            id
            name
            url
        }
    }
}
"""


@dataclass(slots=True)
class ListProjectOptions:
    team: str | None = None
    limit: int = DEFAULT_LIMIT


@dataclass(slots=True)
class CreateProjectOptions:
    name: str
    team: str
    description: str | None = None


class ProjectsResponse(LinearModel):
    projects: Connection[Project]


class ProjectResponse(LinearModel):
    project: ProjectDetail | None = None


class ProjectPayload(MutationPayload):
    project: CreatedProject | None = None


class ProjectCreateResponse(LinearModel):
    project_create: ProjectPayload = Field(alias="projectCreate")


def build_project_filter(options: ListProjectOptions) -> JsonDict:
    project_filter: JsonDict = {}
    if options.team is not None:
        project_filter["accessibleTeams"] = {"key": {"eq": options.team}}
    return project_filter


async def handle_list(
    client: GraphQLExecutor, renderer: Renderer, options: ListProjectOptions
) -> None:
    variables = {"first": options.limit, "filter": build_project_filter(options)}
    response = await client.fetch(ProjectsResponse, PROJECTS_QUERY, variables)
    renderer.projects(response.projects.nodes)


async def handle_get(client: GraphQLExecutor, renderer: Renderer, project_id: str) -> None:
    response = await client.fetch(ProjectResponse, PROJECT_QUERY, {"id": project_id})
    renderer.project_detail(require(response.project, f"project {project_id}"))


async def handle_create(
    client: GraphQLExecutor, renderer: Renderer, options: CreateProjectOptions
) -> None:
    project_input: JsonDict = {
        "name": options.name,
        "teamIds": [await resolve_team_id(client, options.team)],
    }
    put(project_input, "description", options.description)

    response = await client.fetch(
        ProjectCreateResponse, CREATE_PROJECT_MUTATION, {"input": project_input}
    )
    payload = ensure_success(response.project_create, "create project")
    project = returned(payload.project, "project", "creation")
    renderer.message(f"Created project: {project.name}")
    if project.url:
        renderer.message(project.url)


@app.command("list")
def list_projects(
    ctx: typer.Context,
    team: Optional[str] = typer.Option(None, help="Filter by team key."),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-n", min=1, help="Maximum number to show."),
) -> None:
    """List projects."""
    run_handler(ctx, handle_list, ListProjectOptions(team=team, limit=limit))


@app.command("get")
def get_project(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., metavar="ID", help="Project ID."),
) -> None:
    """Show project details."""
    run_handler(ctx, handle_get, project_id)


@app.command("create")
def create_project(
    ctx: typer.Context,
    name: str = typer.Option(..., help="Project name."),
    team: str = typer.Option(..., help="Team key."),
    description: Optional[str] = typer.Option(None, help="Project description."),
) -> None:
    """Create a new project."""
    options = CreateProjectOptions(name=name, team=team, description=description)
    run_handler(ctx, handle_create, options)
