"""Configuration helpers for the Linear CLI."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.linear.app/graphql"
DEFAULT_RELEASE_URL = "https://api.github.com/repos/nickcramaro/linear-cli/releases/latest"


class LinearAPIConfig(BaseSettings):
    """Settings for direct Linear GraphQL API access."""

    api_key: str | None = Field(
        default=None,
        description="Linear Personal API Key.",
    )
    api_key_path: Path | None = Field(
        default=None,
        description="Optional path to a file that contains the API key.",
    )
    api_url: str = Field(
        DEFAULT_API_URL,
        description="Linear GraphQL API endpoint.",
    )
    http_timeout: float = Field(
        default=30.0,
        description="HTTP timeout (seconds) for GraphQL requests.",
    )
    release_url: str = Field(
        DEFAULT_RELEASE_URL,
        description="Release listing endpoint used by `linear update`.",
    )

    model_config = SettingsConfigDict(env_prefix="LINEAR_", env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def _populate_key(self) -> "LinearAPIConfig":
        """Fill ``api_key`` from ``api_key_path`` when only the path is given.

        A missing key is not an error here: commands such as ``update`` never
        talk to the API, so the check happens when the client is built.
        """

        if self.api_key or not self.api_key_path:
            return self

        key_file = self.api_key_path.expanduser()
        if not key_file.exists():  # pragma: no cover - depends on user setup
            raise ValueError(f"API key file '{key_file}' not found")
        self.api_key = key_file.read_text(encoding="utf-8").strip() or None
        return self
