from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from spotify_playlists.api.main import app
from spotify_playlists.auth.token_store import TokenState


@pytest.fixture
def client(services):
    app.state.services = services
    yield AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    del app.state.services


@pytest.mark.asyncio
async def test_health(client):
    async with client as ac:
        r = await ac.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_login_redirects_to_authorize(client):
    async with client as ac:
        r = await ac.get("/login")
    assert r.status_code == 302
    location = r.headers["Location"]
    assert location.startswith("https://accounts.spotify.com/authorize?")
    assert "response_type=code" in location
    assert "scope=user-read-private+user-read-email+playlist-read-private" in location


@pytest.mark.asyncio
async def test_callback_without_code_is_500(client, fake_http):
    async with client as ac:
        r = await ac.get("/callback")
    assert r.status_code == 500
    assert "error" in r.json()
    assert fake_http.calls == []


@pytest.mark.asyncio
async def test_callback_stores_tokens_and_redirects(client, services, fake_http):
    fake_http.respond(200, {"access_token": "A", "refresh_token": "R"})
    async with client as ac:
        r = await ac.get("/callback", params={"code": "abc"})
    assert r.status_code == 302
    assert r.headers["Location"] == "/playlists"
    assert services.store.state == TokenState(access_token="A", refresh_token="R")


@pytest.mark.asyncio
async def test_callback_provider_error_is_500(client, fake_http):
    fake_http.respond(400, {"error": "invalid_grant"})
    async with client as ac:
        r = await ac.get("/callback", params={"code": "abc"})
    assert r.status_code == 500
    assert r.json()["error"]


@pytest.mark.asyncio
async def test_playlists_without_token_redirects_to_login(client, fake_http):
    async with client as ac:
        r = await ac.get("/playlists")
    assert r.status_code == 302
    assert r.headers["Location"] == "/login"
    assert fake_http.calls == []


@pytest.mark.asyncio
async def test_playlists_renders_html(client, logged_in, fake_http):
    fake_http.respond(200, {"items": [{"name": "Focus <3", "external_urls": {"spotify": "https://open.spotify.com/playlist/2"}}]})
    async with client as ac:
        r = await ac.get("/playlists")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "Focus &lt;3" in r.text
    assert "https://open.spotify.com/playlist/2" in r.text


@pytest.mark.asyncio
async def test_playlists_provider_failure_is_500(client, logged_in, fake_http):
    fake_http.respond(500, {"error": {"status": 500}})
    async with client as ac:
        r = await ac.get("/playlists")
    assert r.status_code == 500
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_playlists_rejects_bad_limit(client, logged_in):
    async with client as ac:
        r = await ac.get("/playlists", params={"limit": 0})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_manual_refresh(client, logged_in, fake_http):
    fake_http.respond(200, {"access_token": "A2"})
    async with client as ac:
        r = await ac.get("/refresh")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Access token refreshed"}


@pytest.mark.asyncio
async def test_manual_refresh_without_token(client):
    async with client as ac:
        r = await ac.get("/refresh")
    assert r.json() == {"success": False, "message": "No refresh token"}


@pytest.mark.asyncio
async def test_root_redirects_to_playlists(client):
    async with client as ac:
        r = await ac.get("/")
    assert r.status_code == 302
    assert r.headers["Location"] == "/playlists"


@pytest.mark.asyncio
async def test_callback_write_failure_is_500_json(client, services, fake_http, monkeypatch):
    def _disk_full(state):
        raise OSError("disk full")

    monkeypatch.setattr(services.store, "save", _disk_full)
    fake_http.respond(200, {"access_token": "A", "refresh_token": "R"})
    async with client as ac:
        r = await ac.get("/callback", params={"code": "abc"})
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("application/json")
    assert "disk full" in r.json()["error"]


@pytest.mark.asyncio
async def test_playlists_tolerates_odd_item_shapes(client, logged_in, fake_http):
    fake_http.respond(200, {"items": [{"name": 7, "external_urls": "https://open.spotify.com/playlist/3", "images": "x"}]})
    async with client as ac:
        r = await ac.get("/playlists")
    assert r.status_code == 200
    assert "Untitled Playlist" in r.text
    assert 'href="#"' in r.text
