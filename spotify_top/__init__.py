"""Backend-for-frontend for Spotify login and top artists/tracks."""

__version__ = "0.1.0"
