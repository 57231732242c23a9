"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Queue (Redis sorted sets, in-memory heap)
- Store (Redis JSON documents, in-memory dict)
- Catalog (Spotify Web API and accounts service over httpx)
"""

from jukebox_queue.infrastructure.catalog import SpotifyCatalogClient, SpotifyTokenExchanger
from jukebox_queue.infrastructure.queue import (
    InMemoryPriorityJobQueue,
    RedisConnectionManager,
    RedisPriorityJobQueue,
)
from jukebox_queue.infrastructure.store import InMemoryMetadataStore, RedisMetadataStore

__all__ = [
    "RedisConnectionManager",
    "RedisPriorityJobQueue",
    "InMemoryPriorityJobQueue",
    "RedisMetadataStore",
    "InMemoryMetadataStore",
    "SpotifyCatalogClient",
    "SpotifyTokenExchanger",
]
