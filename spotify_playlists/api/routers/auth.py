"""Spotify OAuth2 endpoints: login, callback and manual refresh."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from loguru import logger

from spotify_playlists.api.deps import Services, get_services
from spotify_playlists.core.errors import ExchangeError

router = APIRouter()


@router.get("/login")
def login(services: Services = Depends(get_services)):
    url = services.flow.build_authorization_url(services.settings.scope_list)
    return RedirectResponse(url=url, status_code=302)


@router.get("/callback")
async def callback(code: str | None = None, error: str | None = None, services: Services = Depends(get_services)):
    try:
        await services.flow.exchange_code(code, error=error)
    except ExchangeError as exc:
        logger.error("Callback failed: {}", exc)
        return JSONResponse({"error": str(exc)}, status_code=500)
    return RedirectResponse(url="/playlists", status_code=302)


@router.get("/refresh")
async def refresh(services: Services = Depends(get_services)) -> dict:
    """Run one refresh cycle on demand."""
    result = await services.refresher.refresh()
    return result.as_dict()
