"""Redis-backed priority job queue.

Layout under ``{prefix}``:

- ``{prefix}:ids``: counter handing out job ids
- ``{prefix}:job:{id}``: hash with topic, priority, payload, state, enqueued_at
- ``{prefix}:jobs:{topic}:pending``: sorted set, score ``-priority``
- ``{prefix}:jobs:{topic}:active``: sorted set of claimed jobs, score claim time

Members are zero-padded job ids. Redis orders equal scores lexicographically,
so within one priority the oldest job comes first.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError as PydanticValidationError
from redis.exceptions import RedisError

from jukebox_queue.domain.queue.entities import QueuedJob
from jukebox_queue.domain.queue.repository import PriorityJobQueue
from jukebox_queue.domain.queue.value_objects import JobId, JobState
from jukebox_queue.domain.shared.datetime_utils import UtcDateTime
from jukebox_queue.domain.shared.exceptions import QueueError
from jukebox_queue.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    import redis.asyncio as redis

logger = logging.getLogger(__name__)

MEMBER_WIDTH: Final[int] = 20


def _member(job_id: JobId) -> str:
    return f"{job_id.value:0{MEMBER_WIDTH}d}"


def _score(priority: int) -> float:
    return float(-priority)


class RedisPriorityJobQueue(PriorityJobQueue):
    def __init__(self, client: redis.Redis, *, key_prefix: str = "q") -> None:
        self._redis = client
        self._prefix = key_prefix

    # === Keys ===

    @property
    def _ids_key(self) -> str:
        return f"{self._prefix}:ids"

    def _job_key(self, job_id: JobId) -> str:
        return f"{self._prefix}:job:{job_id.value}"

    def _pending_key(self, topic: str) -> str:
        return f"{self._prefix}:jobs:{topic}:pending"

    def _active_key(self, topic: str) -> str:
        return f"{self._prefix}:jobs:{topic}:active"

    # === Producer side ===

    async def enqueue(self, topic: str, payload: dict[str, Any], priority: int) -> JobId:
        try:
            job_id = JobId(int(await self._redis.incr(self._ids_key)))
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.hset(
                    self._job_key(job_id),
                    mapping={
                        "topic": topic,
                        "priority": priority,
                        "payload": json.dumps(payload, ensure_ascii=False),
                        "state": JobState.PENDING.value,
                        "enqueued_at": UtcDateTime.now().iso,
                    },
                )
                pipe.zadd(self._pending_key(topic), {_member(job_id): _score(priority)})
                await pipe.execute()
        except RedisError as e:
            raise QueueError(ErrorMessages.QUEUE_UNAVAILABLE.format(error=e), topic=topic) from e

        logger.info(LogTemplates.QUEUE_ENQUEUED, job_id, payload.get("title"), topic, priority)
        return job_id

    # === Consumer side ===

    async def dequeue(self, topic: str) -> QueuedJob | None:
        pending_key = self._pending_key(topic)
        try:
            while True:
                head = await self._redis.zrange(pending_key, 0, 0)
                if not head:
                    return None

                member = head[0]
                job_id = JobId(int(member))
                async with self._redis.pipeline(transaction=True) as pipe:
                    pipe.zadd(self._active_key(topic), {member: UtcDateTime.now().unix_millis})
                    pipe.zrem(pending_key, member)
                    pipe.hset(self._job_key(job_id), "state", JobState.ACTIVE.value)
                    _, removed, _ = await pipe.execute()

                if removed:
                    logger.debug(LogTemplates.QUEUE_CLAIMED, job_id, topic)
                    return await self.get(job_id)
                # Lost the race for this head to another consumer; try the next one.
        except RedisError as e:
            raise QueueError(ErrorMessages.QUEUE_UNAVAILABLE.format(error=e), topic=topic) from e

    async def complete(self, job_id: JobId) -> bool:
        try:
            topic = await self._redis.hget(self._job_key(job_id), "topic")
            if topic is None:
                return False
            # Only a claimed job can complete; a pending one keeps its record.
            if not await self._redis.zrem(self._active_key(topic), _member(job_id)):
                return False
            await self._redis.delete(self._job_key(job_id))
        except RedisError as e:
            raise QueueError(ErrorMessages.QUEUE_UNAVAILABLE.format(error=e)) from e

        logger.debug(LogTemplates.QUEUE_COMPLETED, job_id)
        return True

    async def requeue_active(self, topic: str) -> int:
        active_key = self._active_key(topic)
        requeued = 0
        try:
            for member in await self._redis.zrange(active_key, 0, -1):
                job_id = JobId(int(member))
                priority = await self._redis.hget(self._job_key(job_id), "priority")
                if priority is None:
                    await self._redis.zrem(active_key, member)
                    continue
                async with self._redis.pipeline(transaction=True) as pipe:
                    pipe.zadd(self._pending_key(topic), {member: _score(int(priority))})
                    pipe.zrem(active_key, member)
                    pipe.hset(self._job_key(job_id), "state", JobState.PENDING.value)
                    await pipe.execute()
                requeued += 1
        except RedisError as e:
            raise QueueError(ErrorMessages.QUEUE_UNAVAILABLE.format(error=e), topic=topic) from e

        if requeued:
            logger.warning(LogTemplates.QUEUE_REQUEUED, requeued, topic)
        return requeued

    # === Queries ===

    async def get(self, job_id: JobId) -> QueuedJob | None:
        try:
            data = await self._redis.hgetall(self._job_key(job_id))
        except RedisError as e:
            raise QueueError(ErrorMessages.QUEUE_UNAVAILABLE.format(error=e)) from e

        if not data:
            return None

        try:
            return QueuedJob(
                job_id=job_id,
                topic=data["topic"],
                priority=int(data["priority"]),
                payload=json.loads(data["payload"]),
                state=JobState(data["state"]),
                enqueued_at=UtcDateTime.from_iso(data["enqueued_at"]).dt,
            )
        except (KeyError, ValueError, PydanticValidationError) as e:
            raise QueueError(ErrorMessages.QUEUE_CORRUPT_JOB.format(job_id=job_id)) from e

    async def pending_count(self, topic: str) -> int:
        try:
            return int(await self._redis.zcard(self._pending_key(topic)))
        except RedisError as e:
            raise QueueError(ErrorMessages.QUEUE_UNAVAILABLE.format(error=e), topic=topic) from e
