"""
Queue Domain Repository Interfaces

Abstract base classes defining the contracts for the priority queue and the
metadata store. Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Any

from jukebox_queue.domain.queue.entities import QueuedJob
from jukebox_queue.domain.queue.value_objects import JobId


def song_record_path(project: str, key: str) -> str:
    return f"projects/{project}/Songs/{key}"


def song_id_path(project: str, key: str) -> str:
    """Store path where the queue's job id is linked back onto the song record."""
    return f"{song_record_path(project, key)}/song/song_id"


def access_token_path(identity: str) -> str:
    return f"users/{identity}/access_token"


class PriorityJobQueue(ABC):
    """Durable, topic-partitioned priority queue.

    Within one topic a job with strictly higher priority is dequeued first;
    equal priorities are served first-in-first-out. Topics are independent.
    Delivery is at-least-once: consumers must tolerate seeing a job twice.
    """

    @abstractmethod
    async def enqueue(self, topic: str, payload: dict[str, Any], priority: int) -> JobId:
        """Persist a job and return its newly assigned id.

        Raises:
            QueueError: If the job could not be persisted. Never retried here.
        """
        ...

    @abstractmethod
    async def dequeue(self, topic: str) -> QueuedJob | None:
        """Claim the highest-priority pending job of a topic.

        The job stays recorded as active until ``complete`` is called.
        """
        ...

    @abstractmethod
    async def complete(self, job_id: JobId) -> bool:
        """Mark a claimed job as done and forget it.

        Returns:
            True if the job was active, False otherwise.
        """
        ...

    @abstractmethod
    async def requeue_active(self, topic: str) -> int:
        """Return every claimed-but-unfinished job of a topic to the pending order.

        Returns:
            Number of jobs put back.
        """
        ...

    @abstractmethod
    async def get(self, job_id: JobId) -> QueuedJob | None:
        ...

    @abstractmethod
    async def pending_count(self, topic: str) -> int:
        ...


class MetadataStore(ABC):
    """Path-addressed key-value store holding project and song records.

    Writes are atomic per path. ``create_key`` and ``set_field`` return before
    their writes complete; failures of those writes only reach the logs.
    """

    @abstractmethod
    def create_key(self, project: str, record: dict[str, Any]) -> str:
        """Generate a new song key under the project and start writing the record.

        Returns:
            The generated key, immediately.
        """
        ...

    @abstractmethod
    def set_field(self, path: str, value: Any) -> None:
        """Start writing a value at a path without waiting for it."""
        ...

    @abstractmethod
    async def write(self, path: str, value: Any) -> None:
        """Write a value at a path.

        Raises:
            StoreLinkError: If the write failed.
        """
        ...

    @abstractmethod
    async def read(self, path: str) -> Any | None:
        ...
