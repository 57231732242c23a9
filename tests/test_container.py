"""
Tests for the dependency injection Container.
"""

from unittest.mock import AsyncMock, patch

import pytest

from jukebox_queue.config.container import Container, create_container
from jukebox_queue.config.settings import QueueSettings, Settings
from jukebox_queue.infrastructure.queue.memory_queue import InMemoryPriorityJobQueue
from jukebox_queue.infrastructure.queue.redis_queue import RedisPriorityJobQueue
from jukebox_queue.infrastructure.store.memory_store import InMemoryMetadataStore
from jukebox_queue.infrastructure.store.redis_store import RedisMetadataStore


@pytest.fixture
def inline_settings():
    return Settings(queue=QueueSettings(mode="inline"))


@pytest.fixture
def redis_settings():
    return Settings(queue=QueueSettings(url="redis://:pw@queue.test:6390", mode="redis"))


class TestContainerWiring:
    def test_create_container(self, inline_settings):
        container = create_container(inline_settings)
        assert isinstance(container, Container)
        assert container.settings is inline_settings

    def test_inline_mode_uses_memory_adapters(self, inline_settings):
        container = create_container(inline_settings)

        assert isinstance(container.job_queue, InMemoryPriorityJobQueue)
        assert isinstance(container.metadata_store, InMemoryMetadataStore)
        assert container._connection_manager is None

    def test_redis_mode_shares_one_connection(self, redis_settings):
        container = create_container(redis_settings)

        assert isinstance(container.job_queue, RedisPriorityJobQueue)
        assert isinstance(container.metadata_store, RedisMetadataStore)
        assert container.connection_manager._options.host == "queue.test"
        assert container.connection_manager._options.is_authenticated

    def test_components_are_cached(self, inline_settings):
        container = create_container(inline_settings)

        assert container.submission_orchestrator is container.submission_orchestrator
        assert container.catalog_service is container.catalog_service
        assert container.refresh_coordinator is container.refresh_coordinator
        assert container.http_client is container.http_client

    def test_services_share_background_tasks(self, inline_settings):
        container = create_container(inline_settings)

        orchestrator = container.submission_orchestrator
        assert orchestrator._tasks is container.background_tasks
        assert container.refresh_coordinator._tasks is container.background_tasks

    def test_acknowledge_mode_passed_through(self):
        settings = Settings.model_validate(
            {"queue": {"mode": "inline"}, "submission": {"acknowledge": "persisted"}}
        )
        container = create_container(settings)

        assert container.submission_orchestrator._acknowledge == "persisted"


class TestContainerLifecycle:
    @pytest.mark.asyncio
    async def test_inline_lifecycle(self, inline_settings):
        container = create_container(inline_settings)

        await container.initialize()
        client = container.http_client
        await container.shutdown()

        assert client.is_closed
        assert container._http_client is None

    @pytest.mark.asyncio
    async def test_redis_initialize_pings(self, redis_settings):
        container = create_container(redis_settings)
        manager = container.connection_manager

        with (
            patch.object(manager, "ping", new=AsyncMock(return_value=True)) as mock_ping,
            patch.object(manager, "close", new=AsyncMock()) as mock_close,
        ):
            await container.initialize()
            await container.shutdown()

        mock_ping.assert_awaited_once()
        mock_close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown_drains_background_work(self, inline_settings, make_track, friday_mix):
        container = create_container(inline_settings)
        await container.initialize()

        await container.submission_orchestrator.queue_songs(
            {"songs": [{**make_track("A", 1), "project": friday_mix}]}
        )
        queue = container.job_queue
        await container.shutdown()

        assert len(container.background_tasks) == 0
        assert await queue.pending_count("Friday Mix") == 1

    @pytest.mark.asyncio
    async def test_subscribers_started_and_stopped(self, inline_settings):
        container = create_container(inline_settings)

        await container.initialize()
        assert container.refresh_logger._started is True
        assert container.queue_activity_logger._started is True

        await container.shutdown()
        assert container.refresh_logger._started is False
        assert container.queue_activity_logger._started is False
