"""Priority job queue adapters and the Redis connection manager."""

from jukebox_queue.infrastructure.queue.connection import RedisConnectionManager
from jukebox_queue.infrastructure.queue.memory_queue import InMemoryPriorityJobQueue
from jukebox_queue.infrastructure.queue.redis_queue import RedisPriorityJobQueue

__all__ = [
    "RedisConnectionManager",
    "RedisPriorityJobQueue",
    "InMemoryPriorityJobQueue",
]
