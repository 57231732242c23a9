"""Dictionary-backed metadata store used in inline mode."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from jukebox_queue.domain.queue.repository import MetadataStore, song_record_path
from jukebox_queue.domain.shared.messages import LogTemplates
from jukebox_queue.infrastructure.store.push_keys import generate_push_key

if TYPE_CHECKING:
    from jukebox_queue.utils.background import BackgroundTasks

logger = logging.getLogger(__name__)


class InMemoryMetadataStore(MetadataStore):
    def __init__(
        self,
        background_tasks: BackgroundTasks,
        *,
        key_factory: Callable[[], str] = generate_push_key,
    ) -> None:
        self._tasks = background_tasks
        self._key_factory = key_factory
        self._data: dict[str, Any] = {}

    def create_key(self, project: str, record: dict[str, Any]) -> str:
        key = self._key_factory()
        path = song_record_path(project, key)
        self._tasks.spawn(self.write(path, record), name=f"store-create:{key}")
        return key

    def set_field(self, path: str, value: Any) -> None:
        self._tasks.spawn(self.write(path, value), name=f"store-set:{path}")

    async def write(self, path: str, value: Any) -> None:
        self._data[path.strip("/")] = copy.deepcopy(value)
        logger.debug(LogTemplates.STORE_RECORD_CREATED, path)

    async def read(self, path: str) -> Any | None:
        value = self._data.get(path.strip("/"))
        return copy.deepcopy(value)

    @property
    def paths(self) -> list[str]:
        return sorted(self._data)
