"""Time-ordered record keys in the style of Firebase push ids.

A key is 8 characters of millisecond timestamp followed by 12 random
characters, drawn from an alphabet that sorts in ASCII order. Keys created
later sort later; keys created in the same millisecond increment the random
tail so they still sort in creation order.
"""

from __future__ import annotations

import secrets
from typing import Final

from jukebox_queue.domain.shared.datetime_utils import UtcDateTime

PUSH_CHARS: Final[str] = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"
TIME_CHARS: Final[int] = 8
RANDOM_CHARS: Final[int] = 12


class PushKeyGenerator:
    def __init__(self) -> None:
        self._last_ms = -1
        self._last_random: list[int] = []

    def generate(self, now_ms: int | None = None) -> str:
        now_ms = UtcDateTime.now().unix_millis if now_ms is None else now_ms

        if now_ms == self._last_ms:
            self._increment_random()
        else:
            self._last_ms = now_ms
            self._last_random = [secrets.randbelow(64) for _ in range(RANDOM_CHARS)]
        random_part = "".join(PUSH_CHARS[i] for i in self._last_random)

        time_part = []
        remaining = now_ms
        for _ in range(TIME_CHARS):
            time_part.append(PUSH_CHARS[remaining % 64])
            remaining //= 64

        return "".join(reversed(time_part)) + random_part

    def _increment_random(self) -> None:
        i = RANDOM_CHARS - 1
        while i >= 0 and self._last_random[i] == 63:
            self._last_random[i] = 0
            i -= 1
        if i >= 0:
            self._last_random[i] += 1


_generator = PushKeyGenerator()


def generate_push_key() -> str:
    return _generator.generate()
