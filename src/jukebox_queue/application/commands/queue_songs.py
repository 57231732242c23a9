"""Command for queueing individually submitted songs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class QueueSongsCommand(BaseModel):
    """Songs picked by a user, each carrying the project it is submitted to.

    Songs are kept as raw catalog track objects; each one is parsed on its
    own so a single bad entry does not reject its siblings.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    songs: list[dict[str, Any]]
    device: str | None = None
    refresh_token: str | None = None
    name: str | None = None
