"""In-process priority job queue used in inline mode.

Same ordering contract as the Redis queue, nothing survives a restart.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections import defaultdict
from typing import Any

from jukebox_queue.domain.queue.entities import QueuedJob
from jukebox_queue.domain.queue.repository import PriorityJobQueue
from jukebox_queue.domain.queue.value_objects import JobId, JobState
from jukebox_queue.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class InMemoryPriorityJobQueue(PriorityJobQueue):
    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._jobs: dict[JobId, QueuedJob] = {}
        # Heap entries are (-priority, job_id): highest priority, then oldest id.
        self._pending: dict[str, list[tuple[int, int]]] = defaultdict(list)
        self._active: dict[str, set[JobId]] = defaultdict(set)

    async def enqueue(self, topic: str, payload: dict[str, Any], priority: int) -> JobId:
        job_id = JobId(next(self._ids))
        self._jobs[job_id] = QueuedJob(
            job_id=job_id, topic=topic, priority=priority, payload=dict(payload)
        )
        heapq.heappush(self._pending[topic], (-priority, job_id.value))
        logger.info(LogTemplates.QUEUE_ENQUEUED, job_id, payload.get("title"), topic, priority)
        return job_id

    async def dequeue(self, topic: str) -> QueuedJob | None:
        heap = self._pending.get(topic)
        if not heap:
            return None

        _, raw_id = heapq.heappop(heap)
        job_id = JobId(raw_id)
        job = self._jobs[job_id].model_copy(update={"state": JobState.ACTIVE})
        self._jobs[job_id] = job
        self._active[topic].add(job_id)
        logger.debug(LogTemplates.QUEUE_CLAIMED, job_id, topic)
        return job

    async def complete(self, job_id: JobId) -> bool:
        job = self._jobs.get(job_id)
        if job is None or job_id not in self._active[job.topic]:
            return False

        self._active[job.topic].discard(job_id)
        del self._jobs[job_id]
        logger.debug(LogTemplates.QUEUE_COMPLETED, job_id)
        return True

    async def requeue_active(self, topic: str) -> int:
        active = self._active.pop(topic, set())
        for job_id in active:
            job = self._jobs[job_id].model_copy(update={"state": JobState.PENDING})
            self._jobs[job_id] = job
            heapq.heappush(self._pending[topic], (-job.priority, job_id.value))

        if active:
            logger.warning(LogTemplates.QUEUE_REQUEUED, len(active), topic)
        return len(active)

    async def get(self, job_id: JobId) -> QueuedJob | None:
        return self._jobs.get(job_id)

    async def pending_count(self, topic: str) -> int:
        return len(self._pending.get(topic, []))
