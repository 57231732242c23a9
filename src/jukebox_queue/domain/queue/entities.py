"""Core domain entities for the queue bounded context."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from jukebox_queue.domain.queue.value_objects import (
    JobId,
    JobState,
    Priority,
    TicketState,
    Topic,
)
from jukebox_queue.domain.shared.datetime_utils import utcnow
from jukebox_queue.domain.shared.exceptions import InvalidOperationError
from jukebox_queue.domain.shared.messages import ErrorMessages
from jukebox_queue.domain.shared.types import (
    CatalogUriStr,
    DurationMs,
    NonEmptyStr,
    NonNegativeInt,
    ProjectNameStr,
    TrackTitleStr,
    VoteTally,
)

UNKNOWN_TITLE = "Unknown Title"


class Track(BaseModel):
    """Immutable metadata for one song.

    Accepts both the catalog's field names (``name``, ``id``) and the names
    used on the job payload (``title``, ``time``). URI and duration may be
    missing on raw input; the job builder rejects such tracks.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: TrackTitleStr = Field(
        default=UNKNOWN_TITLE, validation_alias=AliasChoices("title", "name")
    )
    uri: CatalogUriStr | None = None
    duration_ms: DurationMs | None = Field(
        default=None, validation_alias=AliasChoices("duration_ms", "time")
    )
    source_id: NonEmptyStr | None = Field(
        default=None, validation_alias=AliasChoices("source_id", "id")
    )
    artist: NonEmptyStr | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_artists(cls, data: Any) -> Any:
        """Catalog tracks carry ``artists: [{name: ...}]``; keep the first name."""
        if isinstance(data, Mapping) and "artist" not in data:
            artists = data.get("artists")
            if isinstance(artists, list) and artists and isinstance(artists[0], Mapping):
                data = {**data, "artist": artists[0].get("name")}
        return data

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return UNKNOWN_TITLE
        return v

    @field_validator("uri", "source_id", "artist", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        if self.duration_ms is None:
            return "Unknown"

        hours, remainder = divmod(self.duration_ms // 1000, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    @property
    def display_title(self) -> str:
        if self.artist:
            return f"{self.artist} - {self.title}"
        return self.title

    def to_record(self) -> dict[str, Any]:
        """Catalog-shaped representation stored alongside the project."""
        return {
            "name": self.title,
            "uri": self.uri,
            "duration_ms": self.duration_ms,
            "id": self.source_id,
            "artist": self.artist,
        }


class Project(BaseModel):
    """A named playback channel whose vote tally drives queue priority.

    The tally is owned by the external vote store. A Project instance is
    whatever was read at submission time.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: ProjectNameStr
    votes: VoteTally = 0
    submitted_by: str | None = Field(
        default=None,
        validation_alias=AliasChoices("submitted_by", "submitedBy"),
        serialization_alias="submitedBy",
    )
    author: str | None = None
    voted_up_by: str = Field(
        default="",
        validation_alias=AliasChoices("voted_up_by", "votedUpBy"),
        serialization_alias="votedUpBy",
    )
    voted_down_by: str = Field(
        default="",
        validation_alias=AliasChoices("voted_down_by", "votedDownBy"),
        serialization_alias="votedDownBy",
    )

    @property
    def topic(self) -> Topic:
        return Topic(self.name)

    def priority_snapshot(self) -> Priority:
        return Priority.from_votes(self.votes)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def for_playlist(cls, name: str, submitted_by: str | None, owner: str) -> Project:
        """Fresh project shared by every track of one playlist import."""
        return cls(name=name, votes=0, submitted_by=submitted_by, author=owner)


class Device(BaseModel):
    """A playback device reported by the catalog."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr
    name: str = ""
    type: str = ""


class SongSubmission(BaseModel):
    """One track as submitted by a client, annotated with its project."""

    model_config = ConfigDict(frozen=True)

    track: Track
    project: Project | None = None

    @classmethod
    def from_request(cls, raw: Mapping[str, Any]) -> SongSubmission:
        """Parse a catalog track dict carrying a ``project`` key."""
        return cls(track=Track.model_validate(raw), project=raw.get("project"))


class Job(BaseModel):
    """One queued unit of playback work."""

    model_config = ConfigDict(frozen=True)

    track: Track
    project: Project
    priority: Priority
    device_id: str | None = None
    credential: str | None = None
    store_key: NonEmptyStr | None = None

    @property
    def topic(self) -> Topic:
        return self.project.topic

    def with_store_key(self, store_key: str) -> Job:
        return self.model_copy(update={"store_key": store_key})

    def to_payload(self) -> dict[str, Any]:
        """Wire payload read by the playback consumer."""
        if self.store_key is None:
            raise InvalidOperationError(
                operation="enqueue",
                current_state="unlinked",
                message=ErrorMessages.JOB_WITHOUT_STORE_KEY.format(title=self.track.title),
            )
        return {
            "title": self.track.title,
            "project": self.project.name,
            "time": self.track.duration_ms,
            "uri": self.track.uri,
            "refresh_token": self.credential,
            "device": self.device_id,
            "key": self.store_key,
        }


class QueuedJob(BaseModel):
    """A job as held by the priority queue."""

    model_config = ConfigDict(frozen=True)

    job_id: JobId
    topic: NonEmptyStr
    priority: int
    payload: dict[str, Any]
    state: JobState = JobState.PENDING
    enqueued_at: datetime = Field(default_factory=utcnow)

    @property
    def device_id(self) -> str | None:
        return self.payload.get("device")

    @property
    def store_key(self) -> str | None:
        return self.payload.get("key")


class JobTicket(BaseModel):
    """Progress of one track through a submission."""

    index: NonNegativeInt
    title: str
    state: TicketState
    topic: str | None = None
    store_key: str | None = None
    job_id: JobId | None = None
    error: str | None = None

    def advance(self, new_state: TicketState) -> None:
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )
        self.state = new_state

    def fail(self, message: str) -> None:
        self.advance(TicketState.FAILED)
        self.error = message

    @classmethod
    def failed(cls, index: int, title: str, message: str) -> JobTicket:
        return cls(index=index, title=title, state=TicketState.FAILED, error=message)
