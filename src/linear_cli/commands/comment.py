"""`linear comment` commands."""

from __future__ import annotations

from dataclasses import dataclass

import typer
from pydantic import Field

from ..models import Comment, Connection, LinearModel, MutationPayload
from ..output import Renderer
from .base import GraphQLExecutor, ensure_success, require, run_handler

app = typer.Typer(help="Comment operations.", no_args_is_help=True)

ISSUE_COMMENTS_QUERY = """
query IssueComments($id: String!) {
    issue(id: $id) {
        comments {
            nodes {
                id
                body
                createdAt
                user {
                    name
                }
            }
        }
    }
}
"""

CREATE_COMMENT_MUTATION = """
mutation CreateComment($input: CommentCreateInput!) {
    commentCreate(input: $input) {
        success
    }
}
"""


@dataclass(slots=True)
class CreateCommentOptions:
    issue: str
    body: str


class _IssueComments(LinearModel):
    comments: Connection[Comment]


class IssueCommentsResponse(LinearModel):
    issue: _IssueComments | None = None


class CommentCreateResponse(LinearModel):
    comment_create: MutationPayload = Field(alias="commentCreate")


async def handle_list(client: GraphQLExecutor, renderer: Renderer, issue_id: str) -> None:
    response = await client.fetch(IssueCommentsResponse, ISSUE_COMMENTS_QUERY, {"id": issue_id})
    renderer.comments(require(response.issue, f"issue {issue_id}").comments.nodes)


async def handle_create(
    client: GraphQLExecutor, renderer: Renderer, options: CreateCommentOptions
) -> None:
    variables = {"input": {"issueId": options.issue, "body": options.body}}
    response = await client.fetch(CommentCreateResponse, CREATE_COMMENT_MUTATION, variables)
    ensure_success(response.comment_create, "create comment")
    renderer.message("Comment added.")


@app.command("list")
def list_comments(
    ctx: typer.Context,
    issue: str = typer.Argument(..., help="Issue identifier (e.g. ENG-123)."),
) -> None:
    """List comments on an issue."""
    run_handler(ctx, handle_list, issue)


@app.command("create")
def create_comment(
    ctx: typer.Context,
    issue: str = typer.Option(..., help="Issue identifier (e.g. ENG-123)."),
    body: str = typer.Option(..., help="Comment body (markdown supported)."),
) -> None:
    """Add a comment to an issue."""
    run_handler(ctx, handle_create, CreateCommentOptions(issue=issue, body=body))
