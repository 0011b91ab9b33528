"""Token store for Spotify OAuth2 tokens using a JSON file.

Holds the current tokens in memory and writes every change straight through
to disk. Not encrypted; the file should live somewhere only the service
user can read.
"""
from __future__ import annotations

import asyncio
import json
import os
import tempfile
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from loguru import logger

from spotify_playlists.core.errors import TokenStoreError


@dataclass(frozen=True)
class TokenState:
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    def with_access_token(self, access_token: str) -> "TokenState":
        return TokenState(access_token=access_token, refresh_token=self.refresh_token)


class TokenStore:
    """File-backed holder of the process' single TokenState."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._state = TokenState()
        # serializes refresh and code exchange
        self.lock = asyncio.Lock()

    @property
    def state(self) -> TokenState:
        return self._state

    def load(self) -> TokenState:
        """Read the durable file into memory.

        A missing or unreadable file yields an all-null state. A file that
        exists but does not hold a token object raises ``TokenStoreError``.
        """
        if not self.path.exists():
            self._state = TokenState()
            return self._state
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not read token file {}: {}", self.path, exc)
            self._state = TokenState()
            return self._state
        self._state = self._parse(raw)
        logger.info("Loaded saved tokens from {}", self.path)
        return self._state

    def save(self, state: TokenState) -> None:
        """Write ``state`` to disk atomically, then make it the current state."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(asdict(state), f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        self._state = state

    def _parse(self, raw: str) -> TokenState:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise TokenStoreError(f"Token file {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise TokenStoreError(f"Token file {self.path} must contain a JSON object")
        values = {}
        for key in ("access_token", "refresh_token"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise TokenStoreError(f"Token file {self.path}: {key} must be a string or null")
            values[key] = value
        return TokenState(**values)
