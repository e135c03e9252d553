"""`linear issue` commands: list, get, create, update."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import typer
from pydantic import Field

from ..errors import NotFoundError
from ..models import Connection, CreatedIssue, Issue, IssueDetail, LinearModel, MutationPayload
from ..output import Renderer
from .base import GraphQLExecutor, JsonDict, ensure_success, put, require, returned, run_handler
from .team import resolve_team_id

app = typer.Typer(help="Issue operations.", no_args_is_help=True)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25
ASSIGNEE_SELF = "me"

ISSUES_QUERY = """
query Issues($first: Int, $filter: IssueFilter) {
    issues(first: $first, filter: $filter) {
        nodes {
            id
            identifier
            title
            priority
            state {
                name
            }
            assignee {
                name
            }
        }
    }
}
"""

ISSUE_QUERY = """
query Issue($id: String!) {
    issue(id: $id) {
        id
        identifier
        title
        description
        priority
        url
        createdAt
        updatedAt
        state {
            name
        }
        assignee {
            name
        }
        team {
            id
            key
            name
        }
    }
}
"""

ISSUE_STATES_QUERY = """
query IssueTeamStates($id: String!) {
    issue(id: $id) {
        team {
            states {
                nodes {
                    id
                    name
                }
            }
        }
    }
}
"""

CREATE_ISSUE_MUTATION = """
mutation IssueCreate($input: IssueCreateInput!) {
    issueCreate(input: $input) {
        success
        issue {
            id
            identifier
            title
            url
        }
    }
}
"""

UPDATE_ISSUE_MUTATION = """
mutation IssueUpdate($id: String!, $input: IssueUpdateInput!) {
    issueUpdate(id: $id, input: $input) {
        success
        issue {
            id
            identifier
            title
            url
        }
    }
}
"""


@dataclass(slots=True)
class ListIssueOptions:
    team: str | None = None
    state: str | None = None
    assignee: str | None = None
    limit: int = DEFAULT_LIMIT


@dataclass(slots=True)
class CreateIssueOptions:
    title: str
    team: str
    description: str | None = None
    priority: int | None = None


@dataclass(slots=True)
class UpdateIssueOptions:
    id: str
    title: str | None = None
    state: str | None = None
    priority: int | None = None

    def has_changes(self) -> bool:
        return any(value is not None for value in (self.title, self.state, self.priority))


class IssuesResponse(LinearModel):
    issues: Connection[Issue]


class IssueResponse(LinearModel):
    issue: IssueDetail | None = None


class _StateRef(LinearModel):
    id: str
    name: str


class _TeamStates(LinearModel):
    states: Connection[_StateRef]


class _IssueTeam(LinearModel):
    team: _TeamStates


class IssueStatesResponse(LinearModel):
    issue: _IssueTeam | None = None


class IssuePayload(MutationPayload):
    issue: CreatedIssue | None = None


class IssueCreateResponse(LinearModel):
    issue_create: IssuePayload = Field(alias="issueCreate")


class IssueUpdateResponse(LinearModel):
    issue_update: IssuePayload = Field(alias="issueUpdate")


def build_issue_filter(options: ListIssueOptions) -> JsonDict:
    """Translate list options into an ``IssueFilter`` with only supplied keys."""
    issue_filter: JsonDict = {}
    if options.team is not None:
        issue_filter["team"] = {"key": {"eq": options.team}}
    if options.state is not None:
        issue_filter["state"] = {"name": {"eq": options.state}}
    if options.assignee is not None:
        if options.assignee.lower() == ASSIGNEE_SELF:
            issue_filter["assignee"] = {"isMe": {"eq": True}}
        else:
            issue_filter["assignee"] = {"name": {"eqIgnoreCase": options.assignee}}
    return issue_filter


def build_update_input(options: UpdateIssueOptions, state_id: str | None = None) -> JsonDict:
    update: JsonDict = {}
    put(update, "title", options.title)
    put(update, "stateId", state_id)
    put(update, "priority", options.priority)
    return update


async def handle_list(client: GraphQLExecutor, renderer: Renderer, options: ListIssueOptions) -> None:
    variables = {"first": options.limit, "filter": build_issue_filter(options)}
    response = await client.fetch(IssuesResponse, ISSUES_QUERY, variables)
    renderer.issues(response.issues.nodes)


async def handle_get(client: GraphQLExecutor, renderer: Renderer, issue_id: str) -> None:
    response = await client.fetch(IssueResponse, ISSUE_QUERY, {"id": issue_id})
    renderer.issue_detail(require(response.issue, f"issue {issue_id}"))


async def handle_create(
    client: GraphQLExecutor, renderer: Renderer, options: CreateIssueOptions
) -> None:
    issue_input: JsonDict = {
        "teamId": await resolve_team_id(client, options.team),
        "title": options.title,
    }
    put(issue_input, "description", options.description)
    put(issue_input, "priority", options.priority)

    response = await client.fetch(IssueCreateResponse, CREATE_ISSUE_MUTATION, {"input": issue_input})
    payload = ensure_success(response.issue_create, "create issue")
    issue = returned(payload.issue, "issue", "creation")
    renderer.issue_saved("Created", issue.identifier, issue.title, issue.url)


async def resolve_state_id(client: GraphQLExecutor, issue_id: str, state_name: str) -> str:
    """Find the workflow state called ``state_name`` on the issue's team."""
    response = await client.fetch(IssueStatesResponse, ISSUE_STATES_QUERY, {"id": issue_id})
    issue = require(response.issue, f"issue {issue_id}")

    needle = state_name.strip().lower()
    for state in issue.team.states.nodes:
        if state.name.strip().lower() == needle:
            logger.debug("Resolved state %r to %s", state_name, state.id)
            return state.id

    available = ", ".join(sorted(state.name for state in issue.team.states.nodes))
    raise NotFoundError(f"workflow state '{state_name}'. Available options: {available}")


async def handle_update(
    client: GraphQLExecutor, renderer: Renderer, options: UpdateIssueOptions
) -> None:
    if not options.has_changes():
        renderer.message("No changes specified.")
        return

    state_id = None
    if options.state is not None:
        state_id = await resolve_state_id(client, options.id, options.state)

    variables = {"id": options.id, "input": build_update_input(options, state_id)}
    response = await client.fetch(IssueUpdateResponse, UPDATE_ISSUE_MUTATION, variables)
    payload = ensure_success(response.issue_update, "update issue")
    issue = returned(payload.issue, "issue", "update")
    renderer.issue_saved("Updated", issue.identifier, issue.title, issue.url)


@app.command("list")
def list_issues(
    ctx: typer.Context,
    team: Optional[str] = typer.Option(None, help="Filter by team key (e.g. ENG)."),
    state: Optional[str] = typer.Option(None, help='Filter by state name (e.g. "In Progress").'),
    assignee: Optional[str] = typer.Option(None, help='Filter by assignee name, or "me".'),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-n", min=1, help="Maximum number of issues."),
) -> None:
    """List issues."""
    options = ListIssueOptions(team=team, state=state, assignee=assignee, limit=limit)
    run_handler(ctx, handle_list, options)


@app.command("get")
def get_issue(
    ctx: typer.Context,
    issue_id: str = typer.Argument(..., metavar="ID", help="Issue identifier (e.g. ENG-123)."),
) -> None:
    """Show issue details."""
    run_handler(ctx, handle_get, issue_id)


@app.command("create")
def create_issue(
    ctx: typer.Context,
    title: str = typer.Option(..., help="Issue title."),
    team: str = typer.Option(..., help="Team key (e.g. ENG)."),
    description: Optional[str] = typer.Option(None, help="Issue description (markdown)."),
    priority: Optional[int] = typer.Option(
        None, min=0, max=4, help="Priority (1=urgent, 2=high, 3=normal, 4=low)."
    ),
) -> None:
    """Create a new issue."""
    options = CreateIssueOptions(title=title, team=team, description=description, priority=priority)
    run_handler(ctx, handle_create, options)


@app.command("update")
def update_issue(
    ctx: typer.Context,
    issue_id: str = typer.Argument(..., metavar="ID", help="Issue identifier (e.g. ENG-123)."),
    title: Optional[str] = typer.Option(None, help="New title."),
    state: Optional[str] = typer.Option(None, help='New state name (e.g. "Done").'),
    priority: Optional[int] = typer.Option(
        None, min=0, max=4, help="New priority (1=urgent, 2=high, 3=normal, 4=low)."
    ),
) -> None:
    """Update an issue."""
    options = UpdateIssueOptions(id=issue_id, title=title, state=state, priority=priority)
    run_handler(ctx, handle_update, options)
