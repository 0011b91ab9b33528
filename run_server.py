"""Run the FastAPI server (dev helper)."""
from __future__ import annotations

import uvicorn

from spotify_playlists.core.config import get_settings
from spotify_playlists.core.logging_config import setup_logging


def main() -> None:
    s = get_settings()
    setup_logging(s.log_level, s.log_dir)
    uvicorn.run("spotify_playlists.api.main:app", host=s.api_host, port=s.api_port)


if __name__ == "__main__":
    main()
