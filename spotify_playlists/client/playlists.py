"""Spotify Web API client for the current user's playlists.

- Bearer-authenticated GET of ``/v1/me/playlists``
- One refresh-and-retry when the access token has expired
- Maps provider items to ``PlaylistSummary`` with defaults for null fields
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

import httpx
from loguru import logger

from spotify_playlists.auth.refresher import TokenRefresher
from spotify_playlists.auth.token_store import TokenStore
from spotify_playlists.client.reauth import with_reauth
from spotify_playlists.core.errors import AuthenticationRequired, FetchError, TokenExpired
from spotify_playlists.core.http import ClientFactory, make_client_factory, response_details


PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/200?text=No+Image"
UNTITLED_PLAYLIST = "Untitled Playlist"


@dataclass(frozen=True)
class PlaylistSummary:
    name: str
    external_url: str
    cover_image_url: str

    @classmethod
    def from_item(cls, item: dict) -> "PlaylistSummary":
        images = item.get("images")
        first = images[0] if isinstance(images, list) and images and isinstance(images[0], dict) else {}
        urls = item.get("external_urls")
        urls = urls if isinstance(urls, dict) else {}
        return cls(
            name=_text(item.get("name"), UNTITLED_PLAYLIST),
            external_url=_text(urls.get("spotify"), "#"),
            cover_image_url=_text(first.get("url"), PLACEHOLDER_IMAGE_URL),
        )


def _text(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


class PlaylistClient:
    def __init__(
        self,
        store: TokenStore,
        refresher: TokenRefresher,
        api_url: str = "https://api.spotify.com",
        client_factory: Optional[ClientFactory] = None,
        max_reauth: int = 1,
    ) -> None:
        self.store = store
        self.refresher = refresher
        self.url = api_url.rstrip("/") + "/v1/me/playlists"
        self.client_factory = client_factory or make_client_factory()
        self.max_reauth = max_reauth

    async def fetch_playlists(self, limit: Optional[int] = None) -> List[PlaylistSummary]:
        fetch = with_reauth(self.refresher.refresh, max_retries=self.max_reauth)(self._fetch_once)
        return await fetch(limit)

    async def _fetch_once(self, limit: Optional[int] = None) -> List[PlaylistSummary]:
        token = self.store.state.access_token
        if not token:
            raise AuthenticationRequired("No access token; log in first")
        headers = {"Authorization": f"Bearer {token}"}
        params = {"limit": limit} if limit else None
        try:
            async with self.client_factory() as client:
                r = await client.get(self.url, headers=headers, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Playlists fetch transport error: {}", exc)
            raise FetchError(f"Playlists request failed: {exc}") from exc

        if r.status_code == 401:
            raise TokenExpired("Access token expired or invalid", status_code=401, details=response_details(r))
        if r.status_code >= 400:
            details = response_details(r)
            logger.warning("Playlists fetch failed: {} {}", r.status_code, str(details)[:200])
            raise FetchError(f"Playlists request failed (HTTP {r.status_code})", status_code=r.status_code, details=details)
        try:
            body = r.json()
        except ValueError as exc:
            raise FetchError("Playlists response was not JSON", status_code=r.status_code) from exc
        return self._parse(body)

    @staticmethod
    def _parse(body: Any) -> List[PlaylistSummary]:
        if not isinstance(body, dict):
            raise FetchError("Playlists response was not an object", details=body)
        items = body.get("items") or []
        return [PlaylistSummary.from_item(item) for item in items if isinstance(item, dict)]
