"""Domain services for turning submitted tracks into queue jobs."""

from __future__ import annotations

from typing import Any

from jukebox_queue.domain.queue.entities import Job, Project, Track
from jukebox_queue.domain.shared.exceptions import ValidationError
from jukebox_queue.domain.shared.messages import ErrorMessages


class JobRecordBuilder:
    """Builds normalized jobs from a track plus its project context.

    Pure: no I/O and no clock. The job's priority is the project's vote tally
    as seen right now; it is never refreshed afterwards.
    """

    def build(
        self,
        track: Track | None,
        project: Project | None,
        device: str | None,
        credential: str | None,
        *,
        store_key: str | None = None,
    ) -> Job:
        if track is None:
            raise ValidationError(ErrorMessages.TRACK_REQUIRED, field="track")
        if project is None:
            raise ValidationError(
                ErrorMessages.PROJECT_REQUIRED.format(title=track.title), field="project"
            )
        if track.uri is None:
            raise ValidationError(
                ErrorMessages.TRACK_URI_REQUIRED.format(title=track.title), field="uri"
            )
        if track.duration_ms is None:
            raise ValidationError(
                ErrorMessages.TRACK_DURATION_REQUIRED.format(title=track.title),
                field="duration_ms",
            )

        return Job(
            track=track,
            project=project,
            priority=project.priority_snapshot(),
            device_id=device,
            credential=credential,
            store_key=store_key,
        )

    @staticmethod
    def store_record(track: Track, project: Project) -> dict[str, Any]:
        """Record pushed to the metadata store before the job is enqueued."""
        return {"song": {**track.to_record(), "project": project.to_record()}}
