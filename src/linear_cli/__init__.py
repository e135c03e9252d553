"""Linear CLI package."""

__version__ = "0.1.0"

from .errors import LinearError  # noqa: E402
from .graphql_client import LinearGraphQLClient  # noqa: E402
from .settings import LinearAPIConfig  # noqa: E402

__all__ = [
    "LinearAPIConfig",
    "LinearError",
    "LinearGraphQLClient",
    "__version__",
]
