"""Playlist page for the authenticated user."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from loguru import logger

from spotify_playlists.api.deps import Services, get_services
from spotify_playlists.api.render import render_playlists
from spotify_playlists.core.errors import AuthenticationRequired, FetchError

router = APIRouter()


@router.get("/playlists")
async def playlists(
    limit: int | None = Query(default=None, ge=1, le=50),
    services: Services = Depends(get_services),
):
    try:
        items = await services.playlists.fetch_playlists(limit=limit)
    except AuthenticationRequired:
        return RedirectResponse(url="/login", status_code=302)
    except FetchError as exc:
        logger.error("Playlists failed: {} {}", exc.status_code, str(exc.details)[:500])
        return JSONResponse({"error": str(exc)}, status_code=500)
    return HTMLResponse(render_playlists(items))
