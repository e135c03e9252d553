"""Linear GraphQL API client implementation."""

from __future__ import annotations

import logging
import re
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .errors import (
    DEFAULT_RETRY_AFTER,
    AuthenticationError,
    GraphQLError,
    MissingApiKeyError,
    NetworkError,
    RateLimitedError,
)
from .settings import LinearAPIConfig

JsonDict = dict[str, Any]
ModelT = TypeVar("ModelT", bound=BaseModel)

logger = logging.getLogger(__name__)

_OPERATION_PATTERN = re.compile(r"\b(?:query|mutation)\s+(\w+)")


class LinearGraphQLClient:
    """Direct GraphQL API client for Linear.

    One instance serves one CLI invocation: it is opened as an async context
    manager, sends a request or two, and is closed again.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        *,
        http_timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.api_key = api_key
        self.http_timeout = http_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(
        cls,
        config: LinearAPIConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "LinearGraphQLClient":
        """Build a client from settings, failing early when no key is configured."""
        if not config.api_key:
            raise MissingApiKeyError()
        return cls(
            config.api_url,
            config.api_key,
            http_timeout=config.http_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "LinearGraphQLClient":
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.http_timeout),
            headers={
                # Personal API keys are sent as-is; OAuth tokens already carry "Bearer".
                "Authorization": self.api_key,
                "Content-Type": "application/json",
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(
        self, model: type[ModelT], query: str, variables: JsonDict | None = None
    ) -> ModelT:
        """Execute ``query`` and validate the ``data`` object into ``model``."""
        data = await self.execute(query, variables)
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise GraphQLError(f"Unexpected response shape: {exc}") from exc

    async def execute(self, query: str, variables: JsonDict | None = None) -> JsonDict:
        """Execute a GraphQL query/mutation and return its ``data`` object."""
        if self._client is None:
            raise GraphQLError("Client not initialized - use async context manager")

        payload = {"query": query, "variables": variables or {}}
        operation = _operation_name(query)
        logger.debug("POST %s (%s)", self.api_url, operation)

        try:
            response = await self._client.post(self.api_url, json=payload)
        except httpx.TimeoutException as exc:
            raise NetworkError("Request timed out") from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"Request failed: {exc}") from exc

        logger.debug("%s answered HTTP %s", operation, response.status_code)

        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise AuthenticationError()
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise RateLimitedError(parse_retry_after(response.headers.get("retry-after")))

        try:
            body = response.json()
        except ValueError as exc:
            # Covers malformed JSON and bodies that are not valid UTF-8.
            if response.is_error:
                raise GraphQLError(f"HTTP {response.status_code}: {response.text}") from exc
            raise GraphQLError(f"Invalid JSON response: {response.text}") from exc

        return unwrap_envelope(body, status_code=response.status_code)


def unwrap_envelope(body: Any, *, status_code: int = 200) -> JsonDict:
    """Return ``data`` from a ``{data, errors}`` envelope.

    Any non-empty ``errors`` list fails the request, even when ``data`` was
    returned alongside it.
    """
    if not isinstance(body, dict):
        raise GraphQLError(f"Invalid response: {body!r}")

    errors = body.get("errors")
    if errors:
        messages = [
            error.get("message", str(error)) if isinstance(error, dict) else str(error)
            for error in errors
        ]
        raise GraphQLError(messages)

    if status_code >= 400:
        raise GraphQLError(f"HTTP {status_code}: {body}")

    data = body.get("data")
    if data is None:
        raise GraphQLError("no data in response")
    return data


def parse_retry_after(value: str | None) -> int:
    """Seconds from a ``retry-after`` header, falling back to 60."""
    if value is None:
        return DEFAULT_RETRY_AFTER
    try:
        seconds = int(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER
    return seconds if seconds >= 0 else DEFAULT_RETRY_AFTER


def _operation_name(query: str) -> str:
    match = _OPERATION_PATTERN.search(query)
    return match.group(1) if match else "anonymous"
