"""
Queue Bounded Context

Domain logic for turning voted songs into prioritized, device-bound jobs.
"""

from jukebox_queue.domain.queue.entities import (
    Device,
    Job,
    JobTicket,
    Project,
    QueuedJob,
    SongSubmission,
    Track,
)
from jukebox_queue.domain.queue.repository import MetadataStore, PriorityJobQueue
from jukebox_queue.domain.queue.services import JobRecordBuilder
from jukebox_queue.domain.queue.value_objects import (
    JobId,
    JobState,
    Priority,
    SubmissionState,
    SubmissionStatus,
    TicketState,
    Topic,
)

__all__ = [
    # Entities
    "Track",
    "Project",
    "Device",
    "SongSubmission",
    "Job",
    "QueuedJob",
    "JobTicket",
    # Value Objects
    "JobId",
    "Priority",
    "Topic",
    "JobState",
    "SubmissionState",
    "SubmissionStatus",
    "TicketState",
    # Repository
    "PriorityJobQueue",
    "MetadataStore",
    # Services
    "JobRecordBuilder",
]
