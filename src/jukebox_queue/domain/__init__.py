# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, events and exceptions
- queue/: Track, project, job and the vote-weighted queue contracts
"""

from jukebox_queue.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
