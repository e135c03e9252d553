"""Error taxonomy shared by the transport, the handlers and the CLI."""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_RETRY_AFTER = 60


class LinearError(RuntimeError):
    """Base class for every failure that ends a CLI invocation."""

    label = "Error"
    exit_code = 1


class MissingApiKeyError(LinearError):
    exit_code = 2

    def __init__(self) -> None:
        super().__init__("LINEAR_API_KEY environment variable not set")


class AuthenticationError(LinearError):
    label = "Auth error"
    exit_code = 2

    def __init__(self) -> None:
        super().__init__("Authentication failed: invalid API key")


class NotFoundError(LinearError):
    label = "Not found"
    exit_code = 3


class RateLimitedError(LinearError):
    """The API answered 429; the caller decides whether to try again."""

    label = "Rate limited"
    exit_code = 4

    def __init__(self, retry_after: int = DEFAULT_RETRY_AFTER) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited, retry after {retry_after} seconds")


class GraphQLError(LinearError):
    """Errors reported by the API, or a response we could not make sense of."""

    label = "GraphQL error"

    def __init__(self, messages: str | Sequence[str]) -> None:
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__(", ".join(self.messages))


class NetworkError(LinearError):
    label = "Network error"


class UpdateError(LinearError):
    label = "Update failed"
