"""Command for importing a whole catalog playlist into a new project."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from jukebox_queue.domain.shared.types import NonEmptyStr, ProjectNameStr


class SubmitPlaylistCommand(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    user: NonEmptyStr
    access_token: NonEmptyStr
    playlist_id: NonEmptyStr = Field(validation_alias=AliasChoices("playlist_id", "id"))
    project_name: ProjectNameStr = Field(
        validation_alias=AliasChoices("project_name", "projectname")
    )
    submitted_by: str | None = Field(
        default=None, validation_alias=AliasChoices("submitted_by", "submitedBy")
    )
    device: str | None = None
    refresh_token: str | None = None
    name: str | None = None
