"""`linear document` commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer
from pydantic import Field

from ..models import (
    Connection,
    CreatedDocument,
    Document,
    DocumentDetail,
    LinearModel,
    MutationPayload,
)
from ..output import Renderer
from .base import GraphQLExecutor, JsonDict, ensure_success, put, require, returned, run_handler

app = typer.Typer(help="Document operations.", no_args_is_help=True)

DEFAULT_LIMIT = 25

DOCUMENTS_QUERY = """
query Documents($first: Int, $filter: DocumentFilter) {
    documents(first: $first, filter: $filter) {
        nodes {
            id
            title
            updatedAt
        }
    }
}
"""

DOCUMENT_QUERY = """
query Document($id: String!) {
    document(id: $id) {
        id
        title
        content
        createdAt
        updatedAt
    }
}
"""

CREATE_DOCUMENT_MUTATION = """
mutation CreateDocument($input: DocumentCreateInput!) {
    documentCreate(input: $input) {
        success
        document {
            id
            title
        }
    }
}
"""


@dataclass(slots=True)
class ListDocumentOptions:
    project: str | None = None
    limit: int = DEFAULT_LIMIT


@dataclass(slots=True)
class CreateDocumentOptions:
    title: str
    project: str
    content: str | None = None


class DocumentsResponse(LinearModel):
    documents: Connection[Document]


class DocumentResponse(LinearModel):
    document: DocumentDetail | None = None


class DocumentPayload(MutationPayload):
    document: CreatedDocument | None = None


class DocumentCreateResponse(LinearModel):
    document_create: DocumentPayload = Field(alias="documentCreate")


def build_document_filter(options: ListDocumentOptions) -> JsonDict:
    document_filter: JsonDict = {}
    if options.project is not None:
        document_filter["project"] = {"id": {"eq": options.project}}
    return document_filter


async def handle_list(
    client: GraphQLExecutor, renderer: Renderer, options: ListDocumentOptions
) -> None:
    variables = {"first": options.limit, "filter": build_document_filter(options)}
    response = await client.fetch(DocumentsResponse, DOCUMENTS_QUERY, variables)
    renderer.documents(response.documents.nodes)


async def handle_get(client: GraphQLExecutor, renderer: Renderer, document_id: str) -> None:
    response = await client.fetch(DocumentResponse, DOCUMENT_QUERY, {"id": document_id})
    renderer.document_detail(require(response.document, f"document {document_id}"))


async def handle_create(
    client: GraphQLExecutor, renderer: Renderer, options: CreateDocumentOptions
) -> None:
    document_input: JsonDict = {"title": options.title, "projectId": options.project}
    put(document_input, "content", options.content)

    response = await client.fetch(
        DocumentCreateResponse, CREATE_DOCUMENT_MUTATION, {"input": document_input}
    )
    payload = ensure_success(response.document_create, "create document")
    document = returned(payload.document, "document", "creation")
    renderer.message(f"Created document: {document.title}")
    renderer.message(f"ID: {document.id}")


@app.command("list")
def list_documents(
    ctx: typer.Context,
    project: Optional[str] = typer.Option(None, help="Filter by project ID."),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-n", min=1, help="Maximum number to show."),
) -> None:
    """List documents."""
    run_handler(ctx, handle_list, ListDocumentOptions(project=project, limit=limit))


@app.command("get")
def get_document(
    ctx: typer.Context,
    document_id: str = typer.Argument(..., metavar="ID", help="Document ID."),
) -> None:
    """Show a document."""
    run_handler(ctx, handle_get, document_id)


@app.command("create")
def create_document(
    ctx: typer.Context,
    title: str = typer.Option(..., help="Document title."),
    project: str = typer.Option(..., help="Project ID to attach the document to."),
    content: Optional[str] = typer.Option(None, help="Document content (markdown)."),
) -> None:
    """Create a new document."""
    options = CreateDocumentOptions(title=title, project=project, content=content)
    run_handler(ctx, handle_create, options)
