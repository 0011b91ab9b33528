"""Exception hierarchy for the token lifecycle and playlist client."""

from __future__ import annotations

from typing import Any


class SpotifyError(Exception):
    """Base exception for every failure raised by this package."""


class ConfigurationError(SpotifyError):
    """Raised when required credentials are missing from the environment."""


class TokenStoreError(SpotifyError):
    """Raised when the durable token file exists but cannot be parsed."""


class ProviderError(SpotifyError):
    """A failed call to the provider, carrying its status and error payload."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class RefreshError(SpotifyError):
    """Base for refresh-token grant failures."""


class NoRefreshToken(RefreshError):
    """No refresh token is stored; the user has to log in again."""


class RequestFailed(RefreshError, ProviderError):
    """The token endpoint rejected the request or returned an unusable body."""


class ExchangeError(ProviderError):
    """The authorization-code exchange failed."""


class MissingAuthorizationCode(ExchangeError):
    """The callback arrived without a ``code`` parameter."""


class FetchError(ProviderError):
    """An authenticated Web API call failed."""


class TokenExpired(FetchError):
    """The Web API answered 401 for the current access token."""


class AuthenticationRequired(SpotifyError):
    """No access token is available; the caller should redirect to login."""


__all__ = [
    "SpotifyError",
    "ConfigurationError",
    "TokenStoreError",
    "ProviderError",
    "RefreshError",
    "NoRefreshToken",
    "RequestFailed",
    "ExchangeError",
    "MissingAuthorizationCode",
    "FetchError",
    "TokenExpired",
    "AuthenticationRequired",
]
