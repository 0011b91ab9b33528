"""Client for the provider's ``/api/token`` endpoint.

Both the authorization-code and refresh-token grants go through here. The
app authenticates with HTTP Basic auth built from ``client_id:client_secret``.
"""
from __future__ import annotations

import base64
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from spotify_playlists.core.config import Credentials
from spotify_playlists.core.errors import RequestFailed
from spotify_playlists.core.http import ClientFactory, make_client_factory, response_details


def basic_auth_header(credentials: Credentials) -> str:
    pair = f"{credentials.client_id}:{credentials.client_secret.get_secret_value()}"
    return "Basic " + base64.b64encode(pair.encode()).decode()


class TokenEndpoint:
    def __init__(
        self,
        credentials: Credentials,
        accounts_url: str = "https://accounts.spotify.com",
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.credentials = credentials
        self.url = accounts_url.rstrip("/") + "/api/token"
        self.client_factory = client_factory or make_client_factory()

    async def request(self, form: Dict[str, str]) -> Dict[str, Any]:
        """POST a grant and return the JSON body; raise ``RequestFailed`` otherwise."""
        headers = {
            "Authorization": basic_auth_header(self.credentials),
            "Content-Type": "application/x-www-form-urlencoded",
        }
        grant = form.get("grant_type")
        try:
            async with self.client_factory() as client:
                r = await client.post(self.url, data=form, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Token request ({}) transport error: {}", grant, exc)
            raise RequestFailed(f"Token request failed: {exc}") from exc

        if r.status_code >= 400:
            details = response_details(r)
            logger.warning("Token request ({}) failed: {} {}", grant, r.status_code, str(details)[:200])
            raise RequestFailed(
                f"Token request failed (HTTP {r.status_code})",
                status_code=r.status_code,
                details=details,
            )
        try:
            payload = r.json()
        except ValueError as exc:
            raise RequestFailed("Token response was not JSON", status_code=r.status_code, details=r.text[:500]) from exc
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise RequestFailed("Token response has no access_token", status_code=r.status_code, details=payload)
        # the token file only holds strings
        for key in ("access_token", "refresh_token"):
            if payload.get(key) is not None and not isinstance(payload[key], str):
                raise RequestFailed(f"Token response {key} is not a string", status_code=r.status_code, details=payload)
        return payload
