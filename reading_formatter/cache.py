"""In-memory cache of formatted reading tests, keyed by topic + content prefix."""
from __future__ import annotations

import logging
import time
from collections.abc import Callable

from reading_formatter.models import CacheEntry, FormattedReadingTest

_log = logging.getLogger("reading_formatter.cache")

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_KEY_PREFIX_LENGTH = 100


class ResultCache:
    """Process-local cache. Expired entries read as absent but stay in place
    until the same key is stored again."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        key_prefix_length: int = DEFAULT_KEY_PREFIX_LENGTH,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.key_prefix_length = key_prefix_length
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def make_key(self, topic: str, raw_content: str) -> str:
        return f"{topic or ''}-{(raw_content or '')[:self.key_prefix_length]}"

    def get(self, key: str) -> FormattedReadingTest | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl_seconds:
            _log.debug("Cache entry expired: %.60s", key)
            return None
        return entry.data

    def put(self, key: str, data: FormattedReadingTest) -> None:
        self._entries[key] = CacheEntry(key=key, data=data, timestamp=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
