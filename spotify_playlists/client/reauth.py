"""Retry an authenticated call after refreshing an expired token."""
from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable

from loguru import logger

from spotify_playlists.core.errors import TokenExpired


def with_reauth(refresh: Callable[[], Awaitable[Any]], max_retries: int = 1):
    """Decorate an async call so a ``TokenExpired`` triggers ``refresh`` and a retry.

    The wrapped call is re-run from the top after each refresh, at most
    ``max_retries`` times. The last ``TokenExpired`` propagates unchanged.
    """

    def decorator(func: Callable[..., Awaitable[Any]]):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except TokenExpired:
                    if attempt >= max_retries:
                        raise
                    attempt += 1
                    logger.info("Token expired, refreshing (attempt {}/{})", attempt, max_retries)
                    await refresh()

        return wrapper

    return decorator
