"""
Tests for CatalogProxyService (search, playlists, devices).
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from jukebox_queue.application.services.catalog_service import CatalogProxyService
from jukebox_queue.domain.queue.entities import Device
from jukebox_queue.domain.shared.exceptions import RemoteCallError


@pytest.fixture
def catalog_client():
    return AsyncMock()


@pytest.fixture
def refresh_coordinator():
    return MagicMock()


@pytest.fixture
def service(catalog_client, refresh_coordinator):
    return CatalogProxyService(
        catalog_client=catalog_client,
        refresh_coordinator=refresh_coordinator,
        playlist_limit=20,
    )


def _body(**extra):
    return {"access_token": "tok", "refresh_token": "refresh-abc", "name": "bob", **extra}


class TestListDevices:
    @pytest.mark.asyncio
    async def test_expired_token_refreshes_on_device_path(
        self, service, catalog_client, refresh_coordinator
    ):
        catalog_client.list_devices.side_effect = RemoteCallError("The access token expired")

        reply = await service.list_devices(_body())

        assert reply == {"msg": "The access token expired"}
        refresh_coordinator.submit.assert_called_once_with(
            "refresh-abc", "bob", is_device_call=True
        )

    @pytest.mark.asyncio
    async def test_devices_listed(self, service, catalog_client, refresh_coordinator):
        catalog_client.list_devices.return_value = [
            Device(id="d1", name="Kitchen", type="Speaker"),
            Device(id="d2", name="Laptop", type="Computer"),
        ]

        reply = await service.list_devices(_body())

        assert reply == {
            "devices": [
                {"name": "Kitchen", "type": "Speaker", "id": "d1"},
                {"name": "Laptop", "type": "Computer", "id": "d2"},
            ]
        }
        refresh_coordinator.submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_devices_refreshes(self, service, catalog_client, refresh_coordinator):
        catalog_client.list_devices.return_value = []

        reply = await service.list_devices(_body())

        assert reply == {"msg": "no devices"}
        refresh_coordinator.submit.assert_called_once_with(
            "refresh-abc", "bob", is_device_call=True
        )

    @pytest.mark.asyncio
    async def test_missing_access_token(self, service, catalog_client, refresh_coordinator):
        reply = await service.list_devices({"refresh_token": "refresh-abc", "name": "bob"})

        assert reply == {"msg": "access_token undefined"}
        catalog_client.list_devices.assert_not_awaited()
        refresh_coordinator.submit.assert_not_called()


class TestSearch:
    @pytest.mark.asyncio
    async def test_relays_payload(self, service, catalog_client):
        catalog_client.search.return_value = {"tracks": {"items": [{"name": "A"}]}}

        reply = await service.search(_body(search="blue monday"))

        assert reply == {"tracks": {"items": [{"name": "A"}]}}
        catalog_client.search.assert_awaited_once_with("blue monday", "tok")

    @pytest.mark.asyncio
    async def test_malformed_refreshes_on_generic_path(
        self, service, catalog_client, refresh_coordinator
    ):
        catalog_client.search.side_effect = RemoteCallError("Malformed", malformed=True)

        reply = await service.search(_body(search="x"))

        assert reply == {"msg": "Malformed"}
        refresh_coordinator.submit.assert_called_once_with(
            "refresh-abc", "bob", is_device_call=False
        )

    @pytest.mark.asyncio
    async def test_missing_query_rejected_without_io(self, service, catalog_client):
        reply = await service.search(_body())

        assert "msg" in reply
        catalog_client.search.assert_not_awaited()


class TestUserPlaylists:
    @pytest.mark.asyncio
    async def test_uses_configured_limit(self, service, catalog_client):
        catalog_client.list_playlists.return_value = {"items": []}

        reply = await service.user_playlists(_body(user="alice"))

        assert reply == {"items": []}
        catalog_client.list_playlists.assert_awaited_once_with("alice", "tok", 20)

    @pytest.mark.asyncio
    async def test_error_refreshes(self, service, catalog_client, refresh_coordinator):
        catalog_client.list_playlists.side_effect = RemoteCallError("Invalid access token")

        reply = await service.user_playlists(_body(user="alice"))

        assert reply == {"msg": "Invalid access token"}
        refresh_coordinator.submit.assert_called_once_with(
            "refresh-abc", "bob", is_device_call=False
        )
