"""OAuth refresh-token grant against the Spotify accounts service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from jukebox_queue.application.interfaces.token_exchanger import TokenExchanger
from jukebox_queue.domain.shared.exceptions import RemoteCallError
from jukebox_queue.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from ...config.settings import CatalogSettings

logger = logging.getLogger(__name__)


class SpotifyTokenExchanger(TokenExchanger):
    def __init__(self, settings: CatalogSettings, client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._client = client

    async def exchange(self, refresh_token: str) -> str:
        if not refresh_token:
            raise RemoteCallError(ErrorMessages.REFRESH_TOKEN_MISSING)
        if not self._settings.has_client_credentials:
            raise RemoteCallError(ErrorMessages.CATALOG_CREDENTIALS_MISSING)

        try:
            response = await self._client.post(
                self._settings.token_url,
                data={"grant_type": "refresh_token", "refresh_token": refresh_token},
                auth=(
                    self._settings.client_id,
                    self._settings.client_secret.get_secret_value(),
                ),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self._settings.timeout_s,
            )
        except httpx.HTTPError as e:
            raise RemoteCallError(ErrorMessages.REMOTE_TRANSPORT_FAILED.format(error=e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteCallError(
                ErrorMessages.MALFORMED_RESPONSE.format(error=e),
                malformed=True,
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise RemoteCallError(
                ErrorMessages.MALFORMED_RESPONSE.format(error=type(data).__name__),
                malformed=True,
                status_code=response.status_code,
            )

        # The accounts service reports errors as {"error": "...", "error_description": "..."}
        if response.status_code >= 400 or "error" in data:
            message = data.get("error_description") or data.get("error")
            raise RemoteCallError(
                str(message or ErrorMessages.UNKNOWN_REMOTE_ERROR),
                status_code=response.status_code,
            )

        access_token = data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise RemoteCallError(
                ErrorMessages.MALFORMED_RESPONSE.format(error="missing access_token"),
                malformed=True,
                status_code=response.status_code,
            )
        return access_token
