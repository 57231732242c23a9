"""Redis-backed metadata store.

Each store path is one Redis string holding a JSON document at
``{prefix}:{path}``. Paths are not merged: writing ``a/b/c`` leaves the
document at ``a/b`` untouched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from jukebox_queue.domain.queue.repository import MetadataStore, song_record_path
from jukebox_queue.domain.shared.exceptions import StoreLinkError
from jukebox_queue.domain.shared.messages import ErrorMessages, LogTemplates
from jukebox_queue.infrastructure.store.push_keys import generate_push_key

if TYPE_CHECKING:
    import redis.asyncio as redis

    from jukebox_queue.utils.background import BackgroundTasks

logger = logging.getLogger(__name__)


class RedisMetadataStore(MetadataStore):
    def __init__(
        self,
        client: redis.Redis,
        background_tasks: BackgroundTasks,
        *,
        key_prefix: str = "store",
        key_factory: Callable[[], str] = generate_push_key,
    ) -> None:
        self._redis = client
        self._tasks = background_tasks
        self._prefix = key_prefix
        self._key_factory = key_factory

    def _key(self, path: str) -> str:
        return f"{self._prefix}:{path.strip('/')}"

    def create_key(self, project: str, record: dict[str, Any]) -> str:
        key = self._key_factory()
        path = song_record_path(project, key)
        self._tasks.spawn(self._write_logged(path, record), name=f"store-create:{key}")
        return key

    def set_field(self, path: str, value: Any) -> None:
        self._tasks.spawn(self._write_logged(path, value), name=f"store-set:{path}")

    async def write(self, path: str, value: Any) -> None:
        try:
            await self._redis.set(self._key(path), json.dumps(value, ensure_ascii=False))
        except RedisError as e:
            raise StoreLinkError(
                path, ErrorMessages.STORE_WRITE_FAILED.format(path=path, error=e)
            ) from e
        logger.debug(LogTemplates.STORE_RECORD_CREATED, path)

    async def read(self, path: str) -> Any | None:
        try:
            raw = await self._redis.get(self._key(path))
        except RedisError as e:
            raise StoreLinkError(
                path, ErrorMessages.STORE_WRITE_FAILED.format(path=path, error=e)
            ) from e
        return None if raw is None else json.loads(raw)

    async def _write_logged(self, path: str, value: Any) -> None:
        try:
            await self.write(path, value)
        except StoreLinkError as e:
            logger.error(LogTemplates.STORE_WRITE_FAILED, path, e.message)
