"""Service wiring shared by the routers.

``build_services`` assembles the token store, OAuth components and playlist
client around one ``TokenStore``; the lifespan keeps the result on
``app.state`` and routes receive it through ``get_services``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from spotify_playlists.auth.flow import AuthorizationFlow
from spotify_playlists.auth.refresher import RefreshScheduler, TokenRefresher
from spotify_playlists.auth.token_endpoint import TokenEndpoint
from spotify_playlists.auth.token_store import TokenStore
from spotify_playlists.client.playlists import PlaylistClient
from spotify_playlists.core.config import Settings
from spotify_playlists.core.http import ClientFactory, make_client_factory


@dataclass
class Services:
    settings: Settings
    store: TokenStore
    flow: AuthorizationFlow
    refresher: TokenRefresher
    playlists: PlaylistClient
    scheduler: RefreshScheduler


def build_services(
    settings: Settings,
    store: Optional[TokenStore] = None,
    client_factory: Optional[ClientFactory] = None,
) -> Services:
    credentials = settings.credentials()
    store = store or TokenStore(settings.token_file)
    client_factory = client_factory or make_client_factory(settings.http_timeout)
    endpoint = TokenEndpoint(credentials, settings.accounts_url, client_factory)
    refresher = TokenRefresher(store, endpoint, settings.persist_rotated_refresh_token)
    return Services(
        settings=settings,
        store=store,
        flow=AuthorizationFlow(credentials, store, endpoint, settings.accounts_url),
        refresher=refresher,
        playlists=PlaylistClient(store, refresher, settings.api_url, client_factory),
        scheduler=RefreshScheduler(refresher, settings.refresh_interval),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
