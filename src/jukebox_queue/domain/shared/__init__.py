"""
Shared Domain Kernel

Contains types and exceptions shared across the package.
"""

from jukebox_queue.domain.shared.exceptions import (
    DomainError,
    InvalidOperationError,
    QueueError,
    RemoteCallError,
    StoreLinkError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "RemoteCallError",
    "QueueError",
    "StoreLinkError",
    "InvalidOperationError",
]
