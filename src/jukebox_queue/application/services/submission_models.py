"""Result model returned by the submission orchestrator."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...domain.queue.entities import JobTicket
from ...domain.queue.value_objects import SubmissionState, SubmissionStatus, TicketState

_STATUS_CODES = {
    SubmissionStatus.ACCEPTED: 204,
    SubmissionStatus.PARTIAL_FAILURE: 200,
    SubmissionStatus.REMOTE_ERROR: 200,
    SubmissionStatus.REJECTED: 400,
}


class SubmissionResult(BaseModel):
    """What the caller is told about a submission.

    In ``issued`` acknowledgment mode the tickets keep advancing after the
    result is returned, as enqueues and store links complete.
    """

    model_config = ConfigDict(frozen=True)

    status: SubmissionStatus
    message: str | None = None
    tickets: list[JobTicket] = Field(default_factory=list)
    state: SubmissionState = SubmissionState.RESPONDED

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    @property
    def status_code(self) -> int:
        """HTTP-style code a transport would answer with."""
        return _STATUS_CODES[self.status]

    @property
    def issued(self) -> int:
        return sum(1 for t in self.tickets if t.state is not TicketState.FAILED)

    def to_payload(self) -> dict[str, Any]:
        if self.status is SubmissionStatus.ACCEPTED:
            return {"status": self.status.value, "issued": self.issued}
        return {"msg": self.message}

    @classmethod
    def rejected(cls, message: str) -> SubmissionResult:
        return cls(status=SubmissionStatus.REJECTED, message=message)

    @classmethod
    def remote_error(cls, message: str) -> SubmissionResult:
        return cls(status=SubmissionStatus.REMOTE_ERROR, message=message)
