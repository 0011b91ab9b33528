"""HTML page listing the user's playlists."""
from __future__ import annotations

from html import escape
from typing import Iterable

from spotify_playlists.client.playlists import PlaylistSummary


PAGE = """<!doctype html>
<html>
  <head>
    <meta charset='utf-8'/>
    <title>My Spotify Playlists</title>
    <style>
      body {{ font-family: Arial, sans-serif; text-align: center; background: #121212; color: white; }}
      h1 {{ margin-top: 20px; }}
      .playlist {{ display: inline-block; margin: 15px; width: 200px; }}
      img {{ width: 200px; height: 200px; border-radius: 8px; }}
      a {{ text-decoration: none; color: #1DB954; font-weight: bold; display: block; margin-top: 8px; }}
      .empty {{ color: #b3b3b3; }}
    </style>
  </head>
  <body>
    <h1>My Spotify Playlists</h1>
{body}
  </body>
</html>
"""

CARD = """    <div class="playlist">
      <img src="{image}" alt="Cover" />
      <a href="{url}" target="_blank" rel="noopener">{name}</a>
    </div>"""


def render_playlists(playlists: Iterable[PlaylistSummary]) -> str:
    cards = [
        CARD.format(
            image=escape(p.cover_image_url, quote=True),
            url=escape(p.external_url, quote=True),
            name=escape(p.name),
        )
        for p in playlists
    ]
    body = "\n".join(cards) if cards else "    <p class='empty'>No playlists yet.</p>"
    return PAGE.format(body=body)
