"""Submission orchestration: validate, build, enqueue, link."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

from pydantic import ValidationError as PydanticValidationError

from ...domain.queue.entities import UNKNOWN_TITLE, Job, JobTicket, Project, SongSubmission
from ...domain.queue.repository import song_id_path
from ...domain.queue.services import JobRecordBuilder
from ...domain.queue.value_objects import JobId, SubmissionState, SubmissionStatus, TicketState
from ...domain.shared.events import EventBus, JobEnqueued, JobLinkFailed
from ...domain.shared.exceptions import (
    InvalidOperationError,
    QueueError,
    RemoteCallError,
    StoreLinkError,
    ValidationError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..commands.base import parse_command
from ..commands.queue_songs import QueueSongsCommand
from ..commands.submit_playlist import SubmitPlaylistCommand
from .submission_models import SubmissionResult

if TYPE_CHECKING:
    from ...domain.queue.repository import MetadataStore, PriorityJobQueue
    from ...utils.background import BackgroundTasks
    from ..interfaces.catalog_client import CatalogClient
    from .credential_refresh import CredentialRefreshCoordinator

logger = logging.getLogger(__name__)

AcknowledgeMode = Literal["issued", "persisted"]


def _transition(current: SubmissionState, target: SubmissionState) -> SubmissionState:
    if not current.can_transition_to(target):
        raise InvalidOperationError(
            operation=f"transition to {target.value}", current_state=current.value
        )
    return target


def _raw_title(raw: Any) -> str:
    if isinstance(raw, Mapping):
        title = raw.get("name") or raw.get("title")
        if isinstance(title, str) and title.strip():
            return title
    return UNKNOWN_TITLE


class SubmissionOrchestrator:
    """Turns song submissions into queued, store-linked jobs.

    Every track is handled on its own: one bad track or one failed enqueue
    never stops its siblings. The first failure becomes the single message
    returned to the caller.

    With ``acknowledge="issued"`` the result is returned once every enqueue
    has been started; with ``"persisted"`` it waits for the queue to answer.
    Store links are never awaited and their failures only reach the logs.
    """

    def __init__(
        self,
        *,
        job_queue: PriorityJobQueue,
        metadata_store: MetadataStore,
        job_builder: JobRecordBuilder,
        catalog_client: CatalogClient,
        refresh_coordinator: CredentialRefreshCoordinator,
        background_tasks: BackgroundTasks,
        event_bus: EventBus,
        acknowledge: AcknowledgeMode = "issued",
    ) -> None:
        self._queue = job_queue
        self._store = metadata_store
        self._builder = job_builder
        self._catalog = catalog_client
        self._refresh = refresh_coordinator
        self._tasks = background_tasks
        self._bus = event_bus
        self._acknowledge = acknowledge

    # === Entry Points ===

    async def queue_songs(self, raw: Any) -> SubmissionResult:
        """Queue songs that each name the project they belong to."""
        try:
            command = parse_command(QueueSongsCommand, raw)
        except ValidationError as e:
            logger.warning(LogTemplates.SUBMISSION_REJECTED, e.message)
            return SubmissionResult.rejected(e.message)

        return await self._submit(command.songs, command.device, command.refresh_token)

    async def submit_playlist(self, raw: Any) -> SubmissionResult:
        """Import a catalog playlist as a fresh project with zero votes."""
        try:
            command = parse_command(SubmitPlaylistCommand, raw)
        except ValidationError as e:
            logger.warning(LogTemplates.SUBMISSION_REJECTED, e.message)
            return SubmissionResult.rejected(e.message)

        try:
            tracks = await self._catalog.fetch_playlist_tracks(
                command.user, command.playlist_id, command.access_token
            )
        except RemoteCallError as e:
            # The catalog rarely says why; assume the credential and repair it.
            self._refresh.submit(command.refresh_token, command.name, is_device_call=False)
            return SubmissionResult.remote_error(e.message)

        logger.info(
            LogTemplates.SUBMISSION_PLAYLIST_FETCHED,
            len(tracks),
            command.playlist_id,
            command.user,
        )
        project = Project.for_playlist(command.project_name, command.submitted_by, command.user)
        songs = [{**track, "project": project} for track in tracks]
        return await self._submit(songs, command.device, command.refresh_token)

    # === Per-track Protocol ===

    async def _submit(
        self,
        songs: list[dict[str, Any]],
        device: str | None,
        refresh_token: str | None,
    ) -> SubmissionResult:
        state = _transition(SubmissionState.RECEIVED, SubmissionState.VALIDATED)
        tickets: list[JobTicket] = []
        enqueues: list[asyncio.Task[None]] = []

        for index, raw in enumerate(songs):
            try:
                job = self._build_job(index, raw, device, refresh_token)
            except ValidationError as e:
                logger.warning(LogTemplates.SUBMISSION_TRACK_INVALID, index, e.message)
                tickets.append(JobTicket.failed(index, _raw_title(raw), e.message))
                continue

            logger.info(
                LogTemplates.SUBMISSION_ADDING,
                job.track.display_title,
                job.track.duration_formatted,
                job.project.name,
            )
            key = self._store.create_key(
                job.project.name, JobRecordBuilder.store_record(job.track, job.project)
            )
            job = job.with_store_key(key)

            ticket = JobTicket(
                index=index,
                title=job.track.title,
                state=TicketState.BUILT,
                topic=str(job.topic),
                store_key=key,
            )
            tickets.append(ticket)
            enqueues.append(
                self._tasks.spawn(
                    self._enqueue_and_link(job, ticket), name=f"enqueue:{job.topic}:{index}"
                )
            )

        if self._acknowledge == "persisted" and enqueues:
            await asyncio.wait(enqueues)

        state = _transition(state, SubmissionState.RESPONDED)
        failed = [t for t in tickets if t.state is TicketState.FAILED]
        if failed:
            return SubmissionResult(
                status=SubmissionStatus.PARTIAL_FAILURE,
                message=failed[0].error,
                tickets=tickets,
                state=state,
            )

        logger.info(LogTemplates.SUBMISSION_ACCEPTED, len(enqueues), len(tickets))
        return SubmissionResult(status=SubmissionStatus.ACCEPTED, tickets=tickets, state=state)

    def _build_job(
        self, index: int, raw: Any, device: str | None, refresh_token: str | None
    ) -> Job:
        try:
            submission = SongSubmission.from_request(raw)
        except PydanticValidationError as e:
            raise ValidationError(
                ErrorMessages.INVALID_TRACK.format(index=index, error=e.errors()[0]["msg"]),
                field="songs",
            ) from e

        return self._builder.build(submission.track, submission.project, device, refresh_token)

    async def _enqueue_and_link(self, job: Job, ticket: JobTicket) -> None:
        topic = str(job.topic)
        try:
            job_id = await self._queue.enqueue(topic, job.to_payload(), int(job.priority))
        except QueueError as e:
            ticket.fail(e.message)
            logger.error(LogTemplates.QUEUE_ENQUEUE_FAILED, job.track.title, topic, e.message)
            return

        ticket.job_id = job_id
        ticket.advance(TicketState.ENQUEUED)
        await self._bus.publish(
            JobEnqueued(
                topic=topic,
                job_id=job_id.value,
                priority=int(job.priority),
                title=job.track.title,
                store_key=job.store_key or "",
            )
        )
        self._tasks.spawn(self._link(job, job_id, ticket), name=f"link:{job_id}")

    async def _link(self, job: Job, job_id: JobId, ticket: JobTicket) -> None:
        """Write the job id back onto the song record. Failure leaves the job queued."""
        path = song_id_path(job.project.name, job.store_key or "")
        try:
            await self._store.write(path, job_id.value)
        except StoreLinkError as e:
            await self._bus.publish(
                JobLinkFailed(
                    topic=str(job.topic), job_id=job_id.value, path=path, reason=e.message
                )
            )
            return

        ticket.advance(TicketState.LINKED)
        logger.debug(LogTemplates.STORE_LINKED, job_id, path)
