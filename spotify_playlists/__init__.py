"""Spotify OAuth2 token lifecycle and playlist viewer."""
