"""Authorization-code grant: login redirect URL and callback exchange."""
from __future__ import annotations

import urllib.parse
from typing import Iterable, Optional

from loguru import logger

from spotify_playlists.auth.token_endpoint import TokenEndpoint
from spotify_playlists.auth.token_store import TokenState, TokenStore
from spotify_playlists.core.config import Credentials
from spotify_playlists.core.errors import ExchangeError, MissingAuthorizationCode, RequestFailed


class AuthorizationFlow:
    def __init__(
        self,
        credentials: Credentials,
        store: TokenStore,
        endpoint: TokenEndpoint,
        accounts_url: str = "https://accounts.spotify.com",
    ) -> None:
        self.credentials = credentials
        self.store = store
        self.endpoint = endpoint
        self.authorize_url = accounts_url.rstrip("/") + "/authorize"

    def build_authorization_url(self, scopes: Iterable[str]) -> str:
        scope = " ".join(s.strip() for s in scopes if s and s.strip())
        params = {
            "response_type": "code",
            "client_id": self.credentials.client_id,
            "scope": scope,
            "redirect_uri": self.credentials.redirect_uri,
        }
        return self.authorize_url + "?" + urllib.parse.urlencode(params)

    async def exchange_code(self, code: Optional[str], error: Optional[str] = None) -> TokenState:
        """Trade a callback ``code`` for tokens and persist them.

        Raises ``MissingAuthorizationCode`` before any request when the code
        is empty, and ``ExchangeError`` when the provider refuses the grant.
        """
        if error:
            raise ExchangeError(f"Authorization denied: {error}", details={"error": error})
        if not code:
            raise MissingAuthorizationCode("Callback is missing the code parameter")

        async with self.store.lock:
            try:
                body = await self.endpoint.request(
                    {
                        "grant_type": "authorization_code",
                        "code": code,
                        "redirect_uri": self.credentials.redirect_uri,
                    }
                )
            except RequestFailed as exc:
                logger.error("Authorization code exchange failed: {} {}", exc.status_code, str(exc.details)[:500])
                raise ExchangeError(str(exc), status_code=exc.status_code, details=exc.details) from exc

            if not body.get("refresh_token"):
                raise ExchangeError("Token response has no refresh_token", details=body)
            state = TokenState(access_token=body["access_token"], refresh_token=body["refresh_token"])
            try:
                self.store.save(state)
            except OSError as exc:
                logger.error("Could not persist tokens: {}", exc)
                raise ExchangeError(f"Could not persist tokens: {exc}") from exc
        logger.info("Tokens saved")
        return state
