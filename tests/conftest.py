from typing import Any

import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError

# ============================================================================
# Fake Redis
# ============================================================================


class _FakePipeline:
    """Buffers commands and runs them in order on ``execute``."""

    def __init__(self, redis: "FakeAsyncRedis") -> None:
        self._redis = redis
        self._ops: list[tuple[str, tuple, dict]] = []

    async def __aenter__(self) -> "_FakePipeline":
        return self

    async def __aexit__(self, *exc: object) -> None:
        self._ops.clear()

    def __getattr__(self, name: str):
        def queue(*args, **kwargs):
            self._ops.append((name, args, kwargs))
            return self

        return queue

    async def execute(self) -> list[Any]:
        ops, self._ops = self._ops, []
        return [self._redis._call(name, *args, **kwargs) for name, args, kwargs in ops]


class FakeAsyncRedis:
    """Just enough of ``redis.asyncio.Redis`` (decode_responses=True) for the adapters.

    Commands named in ``failing`` raise a Redis connection error.
    """

    def __init__(self) -> None:
        self.strings: dict[str, str] = {}
        self.hashes: dict[str, dict[str, str]] = {}
        self.zsets: dict[str, dict[str, float]] = {}
        self.failing: set[str] = set()
        self.closed = False

    def _call(self, name: str, *args, **kwargs) -> Any:
        if name in self.failing:
            raise RedisConnectionError(f"{name} refused")
        return getattr(self, f"_{name}")(*args, **kwargs)

    def pipeline(self, transaction: bool = True) -> _FakePipeline:
        return _FakePipeline(self)

    # --- commands ---

    def _incr(self, key: str) -> int:
        value = int(self.strings.get(key, "0")) + 1
        self.strings[key] = str(value)
        return value

    def _set(self, key: str, value: str) -> bool:
        self.strings[key] = value
        return True

    def _get(self, key: str) -> str | None:
        return self.strings.get(key)

    def _hset(self, name: str, key: str | None = None, value: Any = None, mapping=None) -> int:
        items = dict(mapping or {})
        if key is not None:
            items[key] = value
        bucket = self.hashes.setdefault(name, {})
        added = sum(1 for k in items if k not in bucket)
        bucket.update({k: str(v) for k, v in items.items()})
        return added

    def _hget(self, name: str, key: str) -> str | None:
        return self.hashes.get(name, {}).get(key)

    def _hgetall(self, name: str) -> dict[str, str]:
        return dict(self.hashes.get(name, {}))

    def _zadd(self, name: str, mapping: dict[str, float]) -> int:
        zset = self.zsets.setdefault(name, {})
        added = sum(1 for m in mapping if m not in zset)
        zset.update({m: float(s) for m, s in mapping.items()})
        return added

    def _zrange(self, name: str, start: int, end: int) -> list[str]:
        ordered = sorted(self.zsets.get(name, {}).items(), key=lambda kv: (kv[1], kv[0]))
        members = [m for m, _ in ordered]
        return members[start:] if end == -1 else members[start : end + 1]

    def _zrem(self, name: str, *members: str) -> int:
        zset = self.zsets.get(name, {})
        return sum(1 for m in members if zset.pop(m, None) is not None)

    def _zcard(self, name: str) -> int:
        return len(self.zsets.get(name, {}))

    def _delete(self, *names: str) -> int:
        removed = 0
        for name in names:
            for space in (self.strings, self.hashes, self.zsets):
                if space.pop(name, None) is not None:
                    removed += 1
        return removed

    def _ping(self) -> bool:
        return True

    # --- async surface ---

    async def incr(self, key):
        return self._call("incr", key)

    async def set(self, key, value):
        return self._call("set", key, value)

    async def get(self, key):
        return self._call("get", key)

    async def hset(self, name, key=None, value=None, mapping=None):
        return self._call("hset", name, key, value, mapping=mapping)

    async def hget(self, name, key):
        return self._call("hget", name, key)

    async def hgetall(self, name):
        return self._call("hgetall", name)

    async def zadd(self, name, mapping):
        return self._call("zadd", name, mapping)

    async def zrange(self, name, start, end):
        return self._call("zrange", name, start, end)

    async def zrem(self, name, *members):
        return self._call("zrem", name, *members)

    async def zcard(self, name):
        return self._call("zcard", name)

    async def delete(self, *names):
        return self._call("delete", *names)

    async def ping(self):
        return self._call("ping")

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis():
    return FakeAsyncRedis()


# ============================================================================
# Cross-cutting Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def background_tasks():
    """Task tracker drained at teardown so no task outlives its test."""
    from jukebox_queue.utils.background import BackgroundTasks

    tasks = BackgroundTasks()
    yield tasks
    await tasks.drain(timeout=5.0)


@pytest.fixture
def event_bus():
    from jukebox_queue.domain.shared.events import EventBus

    return EventBus()


@pytest.fixture(autouse=True)
def _reset_global_event_bus():
    from jukebox_queue.domain.shared.events import reset_event_bus

    yield
    reset_event_bus()


# ============================================================================
# Adapter Fixtures
# ============================================================================


@pytest.fixture
def memory_queue():
    from jukebox_queue.infrastructure.queue.memory_queue import InMemoryPriorityJobQueue

    return InMemoryPriorityJobQueue()


@pytest.fixture
def memory_store(background_tasks):
    from jukebox_queue.infrastructure.store.memory_store import InMemoryMetadataStore

    return InMemoryMetadataStore(background_tasks)


@pytest.fixture
def job_builder():
    from jukebox_queue.domain.queue.services import JobRecordBuilder

    return JobRecordBuilder()


# ============================================================================
# Domain Data Fixtures
# ============================================================================


def catalog_track(name: str, index: int = 0, **overrides: Any) -> dict[str, Any]:
    """A track object shaped like the catalog returns it."""
    track = {
        "name": name,
        "uri": f"spotify:track:{index:022d}",
        "duration_ms": 180_000 + index,
        "id": f"{index:022d}",
        "artists": [{"name": "Test Artist"}],
        "popularity": 50,
    }
    track.update(overrides)
    return track


@pytest.fixture
def make_track():
    return catalog_track


@pytest.fixture
def friday_mix():
    return {
        "name": "Friday Mix",
        "votes": 5,
        "submitedBy": "bob",
        "author": "bob",
        "votedUpBy": "",
        "votedDownBy": "",
    }


@pytest.fixture
def sample_track():
    from jukebox_queue.domain.queue.entities import Track

    return Track.model_validate(catalog_track("Test Track", 1))


@pytest.fixture
def sample_project(friday_mix):
    from jukebox_queue.domain.queue.entities import Project

    return Project.model_validate(friday_mix)
