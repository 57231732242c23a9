"""Port interface for the remote music catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from jukebox_queue.domain.shared.types import NonEmptyStr, PlaylistLimit

if TYPE_CHECKING:
    from ...domain.queue.entities import Device


class CatalogClient(ABC):
    """Interface for catalog lookups made on behalf of a signed-in user.

    Every method raises ``RemoteCallError`` when the catalog answers with a
    body that is not JSON or that carries an ``error`` object.
    """

    @abstractmethod
    async def search(self, query: NonEmptyStr, access_token: str) -> dict[str, Any]:
        """Search tracks; returns the catalog's payload as-is."""
        ...

    @abstractmethod
    async def list_playlists(
        self, user: NonEmptyStr, access_token: str, limit: PlaylistLimit = 20
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    async def fetch_playlist_tracks(
        self, user: NonEmptyStr, playlist_id: NonEmptyStr, access_token: str
    ) -> list[dict[str, Any]]:
        """Fetch the raw catalog track objects of a playlist, in playlist order.

        Items without a track are skipped. Tracks are left unparsed so one bad
        track can be rejected without losing its siblings.
        """
        ...

    @abstractmethod
    async def list_devices(self, access_token: str) -> list["Device"]:
        ...
