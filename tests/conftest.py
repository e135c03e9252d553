from __future__ import annotations

import io
from typing import Any

import pytest

from linear_cli.output import Renderer, make_console

JsonDict = dict[str, Any]


class FakeClient:
    """Stands in for ``LinearGraphQLClient``: replays canned ``data`` objects."""

    def __init__(self, *responses: JsonDict) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, JsonDict | None]] = []

    async def execute(self, query: str, variables: JsonDict | None = None) -> JsonDict:
        self.calls.append((query, variables))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {query}")
        return self.responses.pop(0)

    async def fetch(self, model, query: str, variables: JsonDict | None = None):  # type: ignore[no-untyped-def]
        return model.model_validate(await self.execute(query, variables))


@pytest.fixture
def make_client() -> type[FakeClient]:
    return FakeClient


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def err() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def renderer(out: io.StringIO, err: io.StringIO) -> Renderer:
    return Renderer(make_console(out, color=False, width=120), make_console(err, color=False, width=120))


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:  # type: ignore[no-untyped-def]
    # Keep the developer's own key, key file and .env out of the tests.
    for name in ("LINEAR_API_KEY", "LINEAR_API_KEY_PATH", "LINEAR_API_URL", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")
    monkeypatch.chdir(tmp_path)
