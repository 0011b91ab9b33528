"""Shared httpx helpers for provider calls."""
from __future__ import annotations

from typing import Any, Callable

import httpx


ClientFactory = Callable[[], httpx.AsyncClient]


def make_client_factory(timeout: float = 10) -> ClientFactory:
    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout)

    return factory


def response_details(r: Any) -> Any:
    """Return the provider's JSON error payload, or a truncated text body."""
    try:
        return r.json()
    except ValueError:
        return (r.text or "")[:500]
