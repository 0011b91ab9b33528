"""Refresh-token grant and the periodic refresh task.

``TokenRefresher.refresh`` never raises: every outcome comes back as a
``RefreshResult``. ``RefreshScheduler`` runs it once at startup and then on
a fixed interval until stopped.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from spotify_playlists.auth.token_endpoint import TokenEndpoint
from spotify_playlists.auth.token_store import TokenState, TokenStore
from spotify_playlists.core.errors import NoRefreshToken, RefreshError, RequestFailed


@dataclass
class RefreshResult:
    success: bool
    message: str
    error: Optional[RefreshError] = None

    def as_dict(self) -> dict:
        return {"success": self.success, "message": self.message}


class TokenRefresher:
    def __init__(self, store: TokenStore, endpoint: TokenEndpoint, persist_rotated_refresh_token: bool = False) -> None:
        self.store = store
        self.endpoint = endpoint
        self.persist_rotated_refresh_token = persist_rotated_refresh_token

    async def refresh(self) -> RefreshResult:
        async with self.store.lock:
            refresh_token = self.store.state.refresh_token
            if not refresh_token:
                logger.warning("No refresh token stored; log in again")
                return RefreshResult(False, "No refresh token", NoRefreshToken("No refresh token"))
            try:
                body = await self.endpoint.request(
                    {"grant_type": "refresh_token", "refresh_token": refresh_token}
                )
            except RequestFailed as exc:
                logger.error("Token refresh failed: {}", exc)
                return RefreshResult(False, "Refresh failed", exc)

            new_state = self.store.state.with_access_token(body["access_token"])
            rotated = body.get("refresh_token")
            if rotated and rotated != refresh_token:
                if self.persist_rotated_refresh_token:
                    new_state = TokenState(access_token=new_state.access_token, refresh_token=rotated)
                else:
                    logger.warning("Provider returned a new refresh token; keeping the stored one")
            try:
                self.store.save(new_state)
            except OSError as exc:
                logger.error("Could not persist refreshed token: {}", exc)
                return RefreshResult(False, "Refresh failed", RefreshError(str(exc)))
        logger.info("Access token refreshed")
        return RefreshResult(True, "Access token refreshed")


class RefreshScheduler:
    """Owns the background task that keeps the access token fresh."""

    def __init__(self, refresher: TokenRefresher, interval: float = 3000) -> None:
        self.refresher = refresher
        self.interval = interval
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self._loop())
        logger.info("Token refresh scheduled every {}s", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop.set()
        try:
            await self._task
        finally:
            self._task = None
        logger.info("Token refresh task stopped")

    async def _loop(self) -> None:
        try:
            while True:
                try:
                    result = await self.refresher.refresh()
                    if not result.success:
                        logger.info("Scheduled refresh did not succeed: {}", result.message)
                except Exception as exc:
                    logger.warning("Scheduled refresh error: {}", exc)
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
                    return
                except asyncio.TimeoutError:
                    pass
        except asyncio.CancelledError:  # pragma: no cover
            logger.info("Token refresh task cancelled")
            raise
