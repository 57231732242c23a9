"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when required input is missing or malformed, before any I/O."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class RemoteCallError(DomainError):
    """Raised when a catalog or accounts call returns a malformed or error-bearing body.

    ``malformed`` distinguishes an unparseable body from a well-formed body that
    carries an explicit error object.
    """

    def __init__(
        self,
        message: str,
        *,
        malformed: bool = False,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, code="REMOTE_CALL_ERROR")
        self.malformed = malformed
        self.status_code = status_code


class QueueError(DomainError):
    """Raised when the priority queue fails to persist or claim a job."""

    def __init__(self, message: str, topic: str | None = None) -> None:
        super().__init__(message, code="QUEUE_ERROR")
        self.topic = topic


class StoreLinkError(DomainError):
    """Raised when the job id cannot be written back onto its store record."""

    def __init__(self, path: str, message: str | None = None) -> None:
        msg = message or f"Failed to link job at '{path}'"
        super().__init__(msg, code="STORE_LINK_ERROR")
        self.path = path


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state
