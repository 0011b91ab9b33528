"""Core configuration and constants.

Uses environment variables for secrets and configuration. Credentials are
read once per process and never persisted or logged.
"""
from __future__ import annotations

from functools import lru_cache
import os

from pydantic import BaseModel, ConfigDict, SecretStr

from spotify_playlists.core.errors import ConfigurationError


DEFAULT_SCOPES = "user-read-private user-read-email playlist-read-private"


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Credentials(BaseModel):
    """OAuth client credentials registered with the provider."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: SecretStr
    redirect_uri: str


class Settings(BaseModel):
    """Application settings loaded from environment variables.

    Attributes:
        client_id: OAuth2 Client ID.
        client_secret: OAuth2 Client Secret.
        redirect_uri: OAuth2 Redirect URI registered with the provider.
        token_file: JSON file holding the access/refresh tokens.
        scopes: Space separated scopes requested at login.
        refresh_interval: Seconds between scheduled token refreshes.
        persist_rotated_refresh_token: Store a new refresh token when the
            provider rotates it during a refresh.
        log_level: Logging level string.
        log_dir: Optional directory for the rotating log file.
    """

    app_name: str = "Spotify Playlists"

    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "3000"))

    client_id: str | None = os.getenv("CLIENT_ID")
    client_secret: SecretStr | None = SecretStr(os.environ["CLIENT_SECRET"]) if os.getenv("CLIENT_SECRET") else None
    redirect_uri: str | None = os.getenv("REDIRECT_URI")

    token_file: str = os.getenv("TOKEN_FILE", "tokens.json")
    scopes: str = os.getenv("SPOTIFY_SCOPES", DEFAULT_SCOPES)

    accounts_url: str = os.getenv("SPOTIFY_ACCOUNTS_URL", "https://accounts.spotify.com")
    api_url: str = os.getenv("SPOTIFY_API_URL", "https://api.spotify.com")
    http_timeout: float = float(os.getenv("SPOTIFY_HTTP_TIMEOUT", "10"))

    # 50 minutes; access tokens live for an hour
    refresh_interval: float = float(os.getenv("TOKEN_REFRESH_INTERVAL", "3000"))
    persist_rotated_refresh_token: bool = _flag("SPOTIFY_PERSIST_ROTATED_REFRESH_TOKEN")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: str | None = os.getenv("LOG_DIR")

    @property
    def scope_list(self) -> list[str]:
        return [s for s in self.scopes.split() if s]

    def credentials(self) -> Credentials:
        """Return the client credentials, failing if any are missing."""

        missing = [
            name
            for name, value in (
                ("CLIENT_ID", self.client_id),
                ("CLIENT_SECRET", self.client_secret.get_secret_value() if self.client_secret else None),
                ("REDIRECT_URI", self.redirect_uri),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError("Missing required environment variables: " + ", ".join(missing))
        return Credentials(
            client_id=self.client_id.strip(),
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri.strip(),
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
