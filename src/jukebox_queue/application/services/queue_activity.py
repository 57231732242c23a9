"""Log subscriber for per-job queue outcomes."""

from __future__ import annotations

import logging

from ...domain.shared.events import EventBus, JobEnqueued, JobLinkFailed
from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class QueueActivityLogger:
    """Reports enqueues and broken store links.

    Link failures never reach the submitter, so this log is where they
    surface.
    """

    def __init__(self, event_bus: EventBus) -> None:
        self._bus = event_bus
        self._started = False

    def start(self) -> None:
        if self._started:
            return
        self._bus.subscribe(JobEnqueued, self._on_enqueued)
        self._bus.subscribe(JobLinkFailed, self._on_link_failed)
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self._bus.unsubscribe(JobEnqueued, self._on_enqueued)
        self._bus.unsubscribe(JobLinkFailed, self._on_link_failed)
        self._started = False

    async def _on_enqueued(self, event: JobEnqueued) -> None:
        logger.info(
            LogTemplates.JOB_QUEUED,
            event.job_id,
            event.title,
            event.topic,
            event.priority,
            event.store_key,
        )

    async def _on_link_failed(self, event: JobLinkFailed) -> None:
        logger.warning(LogTemplates.STORE_LINK_FAILED, event.job_id, event.topic, event.reason)
