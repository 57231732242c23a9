"""Relays catalog lookups and repairs credentials when they fail."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...domain.shared.exceptions import RemoteCallError, ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..commands.base import parse_command
from ..commands.catalog import ListDevicesCommand, SearchCommand, UserPlaylistsCommand

if TYPE_CHECKING:
    from ..interfaces.catalog_client import CatalogClient
    from .credential_refresh import CredentialRefreshCoordinator

logger = logging.getLogger(__name__)


def _msg(message: str) -> dict[str, Any]:
    return {"msg": message}


class CatalogProxyService:
    """Search, playlist listing and device listing for a signed-in user.

    Replies are the catalog's own payload on success and ``{"msg": ...}``
    otherwise. Any failed catalog call schedules a credential refresh.
    """

    def __init__(
        self,
        *,
        catalog_client: CatalogClient,
        refresh_coordinator: CredentialRefreshCoordinator,
        playlist_limit: int = 20,
    ) -> None:
        self._catalog = catalog_client
        self._refresh = refresh_coordinator
        self._playlist_limit = playlist_limit

    async def search(self, raw: Any) -> dict[str, Any]:
        try:
            command = parse_command(SearchCommand, raw)
        except ValidationError as e:
            logger.warning(LogTemplates.SUBMISSION_REJECTED, e.message)
            return _msg(e.message)

        try:
            return await self._catalog.search(command.query, command.access_token)
        except RemoteCallError as e:
            self._refresh.submit(command.refresh_token, command.name, is_device_call=False)
            return _msg(e.message)

    async def user_playlists(self, raw: Any) -> dict[str, Any]:
        try:
            command = parse_command(UserPlaylistsCommand, raw)
        except ValidationError as e:
            logger.warning(LogTemplates.SUBMISSION_REJECTED, e.message)
            return _msg(e.message)

        try:
            return await self._catalog.list_playlists(
                command.user, command.access_token, self._playlist_limit
            )
        except RemoteCallError as e:
            self._refresh.submit(command.refresh_token, command.name, is_device_call=False)
            return _msg(e.message)

    async def list_devices(self, raw: Any) -> dict[str, Any]:
        """List playback devices.

        An empty list is treated like an expired credential: a refresh is
        scheduled and ``{"msg": "no devices"}`` returned.
        """
        try:
            command = parse_command(ListDevicesCommand, raw)
        except ValidationError as e:
            logger.warning(LogTemplates.SUBMISSION_REJECTED, e.message)
            return _msg(e.message)

        if not command.access_token:
            return _msg(ErrorMessages.ACCESS_TOKEN_UNDEFINED)

        try:
            devices = await self._catalog.list_devices(command.access_token)
        except RemoteCallError as e:
            self._refresh.submit(command.refresh_token, command.name, is_device_call=True)
            return _msg(e.message)

        if not devices:
            self._refresh.submit(command.refresh_token, command.name, is_device_call=True)
            return _msg(ErrorMessages.NO_DEVICES)

        return {
            "devices": [
                {"name": device.name, "type": device.type, "id": device.id} for device in devices
            ]
        }
