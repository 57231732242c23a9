"""Commands for the catalog lookups relayed on behalf of a user."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from jukebox_queue.domain.shared.types import NonEmptyStr


class SearchCommand(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    query: NonEmptyStr = Field(validation_alias=AliasChoices("query", "search"))
    access_token: NonEmptyStr
    refresh_token: str | None = None
    name: str | None = None


class UserPlaylistsCommand(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    user: NonEmptyStr
    access_token: NonEmptyStr
    refresh_token: str | None = None
    name: str | None = None


class ListDevicesCommand(BaseModel):
    """Device listing. A missing access token is answered, not rejected."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str | None = None
    refresh_token: str | None = None
    name: str | None = None
