"""`linear search`."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from ..models import Connection, LinearModel, SearchResult
from ..output import Renderer
from .base import GraphQLExecutor

DEFAULT_LIMIT = 10

SEARCH_QUERY = """
query SearchIssues($term: String!, $first: Int) {
    searchIssues(term: $term, first: $first) {
        nodes {
            id
            identifier
            title
            state {
                name
            }
        }
    }
}
"""


@dataclass(slots=True)
class SearchOptions:
    query: str
    limit: int = DEFAULT_LIMIT


class SearchResponse(LinearModel):
    search_issues: Connection[SearchResult] = Field(alias="searchIssues")


async def handle_search(client: GraphQLExecutor, renderer: Renderer, options: SearchOptions) -> None:
    variables = {"term": options.query, "first": options.limit}
    response = await client.fetch(SearchResponse, SEARCH_QUERY, variables)
    renderer.search_results(response.search_issues.nodes)
