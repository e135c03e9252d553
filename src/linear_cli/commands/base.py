"""Plumbing shared by every command group."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

import anyio
import httpx
import typer
from pydantic import BaseModel

from ..errors import GraphQLError, LinearError, NotFoundError
from ..graphql_client import LinearGraphQLClient
from ..models import MutationPayload
from ..output import Renderer
from ..settings import LinearAPIConfig

JsonDict = dict[str, Any]
OptionsT = TypeVar("OptionsT")
ModelT = TypeVar("ModelT", bound=BaseModel)
PayloadT = TypeVar("PayloadT", bound=MutationPayload)

logger = logging.getLogger(__name__)


class GraphQLExecutor(Protocol):
    """What a handler needs from the transport; tests pass a fake."""

    async def execute(self, query: str, variables: JsonDict | None = None) -> JsonDict: ...

    async def fetch(
        self, model: type[ModelT], query: str, variables: JsonDict | None = None
    ) -> ModelT: ...


Handler = Callable[[GraphQLExecutor, Renderer, OptionsT], Awaitable[None]]


@dataclass(slots=True)
class CommandContext:
    """Per-invocation state stored on ``typer.Context.obj``."""

    config: LinearAPIConfig
    renderer: Renderer
    transport: httpx.AsyncBaseTransport | None = None


def run_handler(ctx: typer.Context, handler: Handler[OptionsT], options: OptionsT) -> None:
    """Open a client, run ``handler`` to completion and map failures to exit codes."""
    state: CommandContext = ctx.obj

    async def _run() -> None:
        client = LinearGraphQLClient.from_config(state.config, transport=state.transport)
        async with client:
            await handler(client, state.renderer, options)

    with reported_errors(state.renderer):
        anyio.run(_run)


@contextmanager
def reported_errors(renderer: Renderer) -> Iterator[None]:
    """Print a failure with its label and leave with the matching exit code."""
    try:
        yield
    except LinearError as exc:
        logger.debug("Command failed", exc_info=True)
        renderer.error(exc)
        raise typer.Exit(code=exc.exit_code) from exc


def put(target: JsonDict, key: str, value: Any) -> None:
    """Set ``key`` only when a value was supplied.

    The API treats a present key as a constraint, so absent options must not
    show up as ``null``.
    """
    if value is not None:
        target[key] = value


def require(entity: ModelT | None, description: str) -> ModelT:
    if entity is None:
        raise NotFoundError(description)
    return entity


def ensure_success(payload: PayloadT, operation: str) -> PayloadT:
    """Check the ``success`` flag every mutation payload carries."""
    if not payload.success:
        raise GraphQLError(f"Failed to {operation}")
    return payload


def returned(entity: ModelT | None, noun: str, operation: str) -> ModelT:
    """Unwrap the entity a successful mutation hands back."""
    if entity is None:
        raise GraphQLError(f"No {noun} returned from {operation}")
    return entity
