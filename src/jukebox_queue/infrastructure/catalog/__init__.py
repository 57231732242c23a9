"""Spotify adapters for the catalog and accounts ports."""

from jukebox_queue.infrastructure.catalog.spotify_client import SpotifyCatalogClient
from jukebox_queue.infrastructure.catalog.token_exchanger import SpotifyTokenExchanger

__all__ = [
    "SpotifyCatalogClient",
    "SpotifyTokenExchanger",
]
