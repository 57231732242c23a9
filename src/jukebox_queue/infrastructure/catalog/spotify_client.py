"""Spotify Web API implementation of the catalog client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from jukebox_queue.application.interfaces.catalog_client import CatalogClient
from jukebox_queue.domain.queue.entities import Device
from jukebox_queue.domain.shared.exceptions import RemoteCallError
from jukebox_queue.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...config.settings import CatalogSettings

logger = logging.getLogger(__name__)


# === Response Models ===


class _PlaylistItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    track: dict[str, Any] | None = None


class _PlaylistTracksPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[_PlaylistItem] = Field(default_factory=list)


class _DevicesPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    devices: list[dict[str, Any]] = Field(default_factory=list)


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or ErrorMessages.UNKNOWN_REMOTE_ERROR)
    if isinstance(error, str) and error:
        return error
    return ErrorMessages.UNKNOWN_REMOTE_ERROR


class SpotifyCatalogClient(CatalogClient):
    """Catalog client speaking the Spotify Web API.

    The ``httpx.AsyncClient`` is owned by the caller (the container) and is
    shared with the token exchanger.
    """

    def __init__(self, settings: CatalogSettings, client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._client = client
        self._base_url = settings.api_base_url.rstrip("/")

    async def _get_json(
        self,
        operation: str,
        path: str,
        access_token: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """GET a catalog resource and classify the body.

        Raises:
            RemoteCallError: ``malformed=True`` for non-JSON or non-object
                bodies, otherwise for an embedded error object or a transport
                failure.
        """
        try:
            response = await self._client.get(
                f"{self._base_url}{path}",
                params=params,
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {access_token}",
                },
                timeout=self._settings.timeout_s,
            )
        except httpx.HTTPError as e:
            logger.error(LogTemplates.CATALOG_REMOTE_ERROR, operation, e)
            raise RemoteCallError(ErrorMessages.REMOTE_TRANSPORT_FAILED.format(error=e)) from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error(LogTemplates.CATALOG_REMOTE_ERROR, operation, e)
            raise RemoteCallError(
                ErrorMessages.MALFORMED_RESPONSE.format(error=e),
                malformed=True,
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise RemoteCallError(
                ErrorMessages.MALFORMED_RESPONSE.format(error=type(body).__name__),
                malformed=True,
                status_code=response.status_code,
            )

        if body.get("error"):
            message = _error_message(body["error"])
            logger.error(LogTemplates.CATALOG_REMOTE_ERROR, operation, message)
            raise RemoteCallError(message, status_code=response.status_code)

        return body

    async def search(self, query: str, access_token: str) -> dict[str, Any]:
        logger.info(LogTemplates.CATALOG_SEARCHING, query)
        return await self._get_json(
            "search", "/search", access_token, params={"q": query, "type": "track"}
        )

    async def list_playlists(
        self, user: str, access_token: str, limit: int = 20
    ) -> dict[str, Any]:
        return await self._get_json(
            "list_playlists", f"/users/{user}/playlists", access_token, params={"limit": limit}
        )

    async def fetch_playlist_tracks(
        self, user: str, playlist_id: str, access_token: str
    ) -> list[dict[str, Any]]:
        body = await self._get_json(
            "fetch_playlist_tracks",
            f"/users/{user}/playlists/{playlist_id}/tracks",
            access_token,
        )
        try:
            page = _PlaylistTracksPage.model_validate(body)
        except PydanticValidationError as e:
            raise RemoteCallError(
                ErrorMessages.MALFORMED_RESPONSE.format(error=e), malformed=True
            ) from e

        tracks: list[dict[str, Any]] = []
        for item in page.items:
            if item.track is None:
                logger.debug(LogTemplates.CATALOG_SKIPPED_ITEM)
                continue
            tracks.append(item.track)
        return tracks

    async def list_devices(self, access_token: str) -> list[Device]:
        body = await self._get_json("list_devices", "/me/player/devices", access_token)
        try:
            page = _DevicesPage.model_validate(body)
        except PydanticValidationError as e:
            raise RemoteCallError(
                ErrorMessages.MALFORMED_RESPONSE.format(error=e), malformed=True
            ) from e

        devices: list[Device] = []
        for raw in page.devices:
            # Restricted devices are reported without an id and cannot be targeted.
            if not raw.get("id"):
                continue
            devices.append(Device.model_validate(raw))
        return devices
