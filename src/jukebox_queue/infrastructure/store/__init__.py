"""Metadata store adapters (Redis and in-memory)."""

from jukebox_queue.infrastructure.store.memory_store import InMemoryMetadataStore
from jukebox_queue.infrastructure.store.push_keys import generate_push_key
from jukebox_queue.infrastructure.store.redis_store import RedisMetadataStore

__all__ = [
    "InMemoryMetadataStore",
    "RedisMetadataStore",
    "generate_push_key",
]
