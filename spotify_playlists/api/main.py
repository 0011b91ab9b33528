"""FastAPI application for the Spotify playlists viewer.

Endpoints:
- GET /login: redirect to the Spotify authorize page
- GET /callback: exchange the authorization code and store tokens
- GET /playlists: HTML list of the user's playlists
- GET /refresh: refresh the access token on demand

The lifespan loads stored tokens and owns the periodic refresh task.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from loguru import logger

from spotify_playlists.api.deps import build_services
from spotify_playlists.api.routers.auth import router as auth_router
from spotify_playlists.api.routers.playlists import router as playlists_router
from spotify_playlists.core.config import get_settings
from spotify_playlists.core.logging_config import setup_logging

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_dir)
    # Tests may install their own services before startup
    services = getattr(app.state, "services", None) or build_services(settings)
    services.store.load()
    app.state.services = services
    services.scheduler.start()
    try:
        yield
    finally:
        await services.scheduler.stop()
        logger.info("Shutdown complete")


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.get("/health")
async def health() -> dict:
    """Return API health status."""

    return {"status": "ok"}


@app.get("/")
async def root():
    return RedirectResponse(url="/playlists", status_code=302)


app.include_router(auth_router, prefix="", tags=["auth"])
app.include_router(playlists_router, prefix="", tags=["playlists"])
