"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the queue, store, catalog adapters and the
application services built on top of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import httpx

    from ..application.interfaces.catalog_client import CatalogClient
    from ..application.interfaces.token_exchanger import TokenExchanger
    from ..application.services.catalog_service import CatalogProxyService
    from ..application.services.credential_refresh import (
        CredentialRefreshCoordinator,
        CredentialRefreshLogger,
    )
    from ..application.services.queue_activity import QueueActivityLogger
    from ..application.services.submission_service import SubmissionOrchestrator
    from ..domain.queue.repository import MetadataStore, PriorityJobQueue
    from ..domain.queue.services import JobRecordBuilder
    from ..domain.shared.events import EventBus
    from ..infrastructure.queue.connection import RedisConnectionManager
    from ..utils.background import BackgroundTasks
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. In ``inline``
    queue mode no Redis connection is ever opened.
    """

    settings: Settings

    # Cross-cutting
    _background_tasks: BackgroundTasks | None = None
    _event_bus: EventBus | None = None

    # Infrastructure
    _connection_manager: RedisConnectionManager | None = None
    _http_client: httpx.AsyncClient | None = None
    _job_queue: PriorityJobQueue | None = None
    _metadata_store: MetadataStore | None = None
    _catalog_client: CatalogClient | None = None
    _token_exchanger: TokenExchanger | None = None

    # Domain services
    _job_builder: JobRecordBuilder | None = None

    # Application services
    _refresh_coordinator: CredentialRefreshCoordinator | None = None
    _submission_orchestrator: SubmissionOrchestrator | None = None
    _catalog_service: CatalogProxyService | None = None

    # Event subscribers
    _refresh_logger: CredentialRefreshLogger | None = None
    _queue_activity_logger: QueueActivityLogger | None = None

    @property
    def is_inline(self) -> bool:
        return self.settings.queue.mode == "inline"

    # === Cross-cutting ===

    @property
    def background_tasks(self) -> BackgroundTasks:
        if self._background_tasks is None:
            from ..utils.background import BackgroundTasks

            self._background_tasks = BackgroundTasks()
        return self._background_tasks

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import get_event_bus

            self._event_bus = get_event_bus()
        return self._event_bus

    # === Infrastructure ===

    @property
    def connection_manager(self) -> RedisConnectionManager:
        """Get the Redis connection manager shared by the queue and the store."""
        if self._connection_manager is None:
            from ..infrastructure.queue.connection import RedisConnectionManager

            self._connection_manager = RedisConnectionManager(
                self.settings.queue.connection_options()
            )
        return self._connection_manager

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            import httpx

            self._http_client = httpx.AsyncClient(timeout=self.settings.catalog.timeout_s)
        return self._http_client

    @property
    def job_queue(self) -> PriorityJobQueue:
        """Get the priority job queue for the configured mode."""
        if self._job_queue is None:
            if self.is_inline:
                from ..infrastructure.queue.memory_queue import InMemoryPriorityJobQueue

                self._job_queue = InMemoryPriorityJobQueue()
            else:
                from ..infrastructure.queue.redis_queue import RedisPriorityJobQueue

                self._job_queue = RedisPriorityJobQueue(
                    self.connection_manager.client, key_prefix=self.settings.queue.key_prefix
                )
        return self._job_queue

    @property
    def metadata_store(self) -> MetadataStore:
        """Get the metadata store for the configured mode."""
        if self._metadata_store is None:
            if self.is_inline:
                from ..infrastructure.store.memory_store import InMemoryMetadataStore

                self._metadata_store = InMemoryMetadataStore(self.background_tasks)
            else:
                from ..infrastructure.store.redis_store import RedisMetadataStore

                self._metadata_store = RedisMetadataStore(
                    self.connection_manager.client,
                    self.background_tasks,
                    key_prefix=self.settings.store.key_prefix,
                )
        return self._metadata_store

    @property
    def catalog_client(self) -> CatalogClient:
        if self._catalog_client is None:
            from ..infrastructure.catalog.spotify_client import SpotifyCatalogClient

            self._catalog_client = SpotifyCatalogClient(self.settings.catalog, self.http_client)
        return self._catalog_client

    @property
    def token_exchanger(self) -> TokenExchanger:
        if self._token_exchanger is None:
            from ..infrastructure.catalog.token_exchanger import SpotifyTokenExchanger

            self._token_exchanger = SpotifyTokenExchanger(self.settings.catalog, self.http_client)
        return self._token_exchanger

    # === Domain Services ===

    @property
    def job_builder(self) -> JobRecordBuilder:
        if self._job_builder is None:
            from ..domain.queue.services import JobRecordBuilder

            self._job_builder = JobRecordBuilder()
        return self._job_builder

    # === Application Services ===

    @property
    def refresh_coordinator(self) -> CredentialRefreshCoordinator:
        if self._refresh_coordinator is None:
            from ..application.services.credential_refresh import CredentialRefreshCoordinator

            self._refresh_coordinator = CredentialRefreshCoordinator(
                token_exchanger=self.token_exchanger,
                metadata_store=self.metadata_store,
                background_tasks=self.background_tasks,
                event_bus=self.event_bus,
            )
        return self._refresh_coordinator

    @property
    def submission_orchestrator(self) -> SubmissionOrchestrator:
        if self._submission_orchestrator is None:
            from ..application.services.submission_service import SubmissionOrchestrator

            self._submission_orchestrator = SubmissionOrchestrator(
                job_queue=self.job_queue,
                metadata_store=self.metadata_store,
                job_builder=self.job_builder,
                catalog_client=self.catalog_client,
                refresh_coordinator=self.refresh_coordinator,
                background_tasks=self.background_tasks,
                event_bus=self.event_bus,
                acknowledge=self.settings.submission.acknowledge,
            )
        return self._submission_orchestrator

    @property
    def catalog_service(self) -> CatalogProxyService:
        if self._catalog_service is None:
            from ..application.services.catalog_service import CatalogProxyService

            self._catalog_service = CatalogProxyService(
                catalog_client=self.catalog_client,
                refresh_coordinator=self.refresh_coordinator,
                playlist_limit=self.settings.catalog.playlist_limit,
            )
        return self._catalog_service

    # === Event Subscribers ===

    @property
    def refresh_logger(self) -> CredentialRefreshLogger:
        if self._refresh_logger is None:
            from ..application.services.credential_refresh import CredentialRefreshLogger

            self._refresh_logger = CredentialRefreshLogger(self.event_bus)
        return self._refresh_logger

    @property
    def queue_activity_logger(self) -> QueueActivityLogger:
        if self._queue_activity_logger is None:
            from ..application.services.queue_activity import QueueActivityLogger

            self._queue_activity_logger = QueueActivityLogger(self.event_bus)
        return self._queue_activity_logger

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Open the queue connection and start subscribers."""
        if not self.is_inline:
            await self.connection_manager.ping()

        self.refresh_logger.start()
        self.queue_activity_logger.start()
        logger.info(LogTemplates.CONTAINER_INITIALIZED, self.settings.queue.mode)

    async def shutdown(self) -> None:
        """Drain background work, then close every open resource."""
        await self.background_tasks.drain(self.settings.submission.drain_timeout_s)

        for subscriber in (self._refresh_logger, self._queue_activity_logger):
            try:
                if subscriber is not None:
                    subscriber.stop()
            except Exception as exc:
                logger.warning("Failed stopping %s: %r", type(subscriber).__name__, exc)

        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

        if self._connection_manager is not None:
            await self._connection_manager.close()

        logger.info(LogTemplates.CONTAINER_SHUTDOWN)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
