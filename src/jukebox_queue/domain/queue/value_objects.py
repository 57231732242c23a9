"""Immutable value objects for the queue bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from jukebox_queue.domain.shared.messages import ErrorMessages


@dataclass(frozen=True)
class JobId:
    """Queue-assigned job identifier, unique and monotonically increasing."""

    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError(ErrorMessages.INVALID_JOB_ID)

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True, order=True)
class Priority:
    """Snapshot of a project's vote tally, frozen when the job is built.

    Later up/down votes on the project never reach an already built job.
    """

    value: int

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def from_votes(cls, votes: int) -> Priority:
        return cls(int(votes))


@dataclass(frozen=True)
class Topic:
    """Queue partition key. One topic per project name."""

    name: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError(ErrorMessages.EMPTY_TOPIC)

    def __str__(self) -> str:
        return self.name


class JobState(Enum):
    """Lifecycle of a job inside the priority queue."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETE = "complete"


class SubmissionState(Enum):
    """Request-level states of a submission.

    State transitions:
    - RECEIVED -> VALIDATED (request fields present)
    - RECEIVED -> RESPONDED (rejected before any I/O)
    - VALIDATED -> RESPONDED (accepted, partially failed, or remote error)
    """

    RECEIVED = "received"
    VALIDATED = "validated"
    RESPONDED = "responded"

    def can_transition_to(self, target: SubmissionState) -> bool:
        valid_transitions = {
            SubmissionState.RECEIVED: {SubmissionState.VALIDATED, SubmissionState.RESPONDED},
            SubmissionState.VALIDATED: {SubmissionState.RESPONDED},
            SubmissionState.RESPONDED: set(),
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_terminal(self) -> bool:
        return self == SubmissionState.RESPONDED


class TicketState(Enum):
    """Per-track states within one submission.

    State transitions:
    - BUILT -> ENQUEUED (queue accepted the job)
    - ENQUEUED -> LINKED (job id written back to the store record)
    - BUILT -> FAILED (enqueue failed)

    A ticket whose job could not be built starts out FAILED. A failed store
    link leaves the ticket ENQUEUED: the job is still playable.
    """

    BUILT = "built"
    ENQUEUED = "enqueued"
    LINKED = "linked"
    FAILED = "failed"

    def can_transition_to(self, target: TicketState) -> bool:
        valid_transitions = {
            TicketState.BUILT: {TicketState.ENQUEUED, TicketState.FAILED},
            TicketState.ENQUEUED: {TicketState.LINKED},
            TicketState.LINKED: set(),
            TicketState.FAILED: set(),
        }
        return target in valid_transitions.get(self, set())


class SubmissionStatus(Enum):
    """Outcome reported back to the caller."""

    ACCEPTED = "accepted"
    PARTIAL_FAILURE = "partial_failure"
    REJECTED = "rejected"
    REMOTE_ERROR = "remote_error"

    @property
    def is_success(self) -> bool:
        return self == SubmissionStatus.ACCEPTED
