from __future__ import annotations

import asyncio
import json
from typing import Any, List

import pytest

from spotify_playlists.api.deps import build_services
from spotify_playlists.auth.token_store import TokenState, TokenStore
from spotify_playlists.core.config import Settings


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json body")
        return self._payload


class _FakeAsyncClient:
    def __init__(self, http: "FakeHTTP"):
        self._http = http

    async def __aenter__(self) -> "_FakeAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        return None

    async def _next(self, method: str, url: str, **kwargs) -> _FakeResponse:
        self._http.calls.append({"method": method, "url": url, **kwargs})
        if not self._http.queue:
            raise AssertionError(f"Unexpected request to {url}")
        item = self._http.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, tuple):
            gate, item = item
            await gate.wait()
        return item

    async def post(self, url: str, data: dict | None = None, headers: dict | None = None) -> _FakeResponse:
        return await self._next("POST", url, data=data, headers=headers)

    async def get(self, url: str, headers: dict | None = None, params: dict | None = None) -> _FakeResponse:
        return await self._next("GET", url, headers=headers, params=params)


class FakeHTTP:
    """Client factory whose clients answer from one shared response queue."""

    def __init__(self) -> None:
        self.queue: List[Any] = []
        self.calls: List[dict] = []

    def __call__(self) -> _FakeAsyncClient:
        return _FakeAsyncClient(self)

    def respond(self, status_code: int, payload: Any = None, text: str | None = None) -> "FakeHTTP":
        self.queue.append(_FakeResponse(status_code, payload, text))
        return self

    def fail(self, exc: Exception) -> "FakeHTTP":
        self.queue.append(exc)
        return self

    def hold(self, status_code: int, payload: Any = None) -> asyncio.Event:
        """Queue a response that is only delivered once the returned event is set."""
        gate = asyncio.Event()
        self.queue.append((gate, _FakeResponse(status_code, payload)))
        return gate

    def methods(self) -> List[str]:
        return [c["method"] for c in self.calls]


@pytest.fixture
def fake_http() -> FakeHTTP:
    return FakeHTTP()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        client_id="cid",
        client_secret="secret",
        redirect_uri="http://localhost:3000/callback",
        token_file=str(tmp_path / "tokens.json"),
    )


@pytest.fixture
def store(settings) -> TokenStore:
    return TokenStore(settings.token_file)


@pytest.fixture
def services(settings, store, fake_http):
    return build_services(settings, store=store, client_factory=fake_http)


@pytest.fixture
def logged_in(store) -> TokenStore:
    store.save(TokenState(access_token="A", refresh_token="R"))
    return store
