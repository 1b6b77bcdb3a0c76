from __future__ import annotations

from typing import Optional

from ...domain.constants import KEY_SET_TTL_MS
from ...domain.entities import CacheEntry
from ...domain.ports import Clock, KeySetSource, SigningKeySet
from ...logging_config import get_logger
from ..clock import system_clock_ms
from .key_cache import KeySetCache

logger = get_logger(__name__)


class CachedKeySetProvider:
    """
    Read-through key source: serve the cached key set while it is fresh,
    otherwise fetch and replace it.

    A failed fetch propagates to the caller and leaves the cache untouched.
    Concurrent misses may fetch more than once; nothing waits on another
    request's fetch.
    """

    def __init__(
        self,
        fetcher: KeySetSource,
        cache: Optional[KeySetCache] = None,
        clock: Clock = system_clock_ms,
        ttl_ms: int = KEY_SET_TTL_MS,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache if cache is not None else KeySetCache()
        self._clock = clock
        self._ttl_ms = ttl_ms

    @property
    def cache(self) -> KeySetCache:
        return self._cache

    def get_keys(self, domain: str) -> SigningKeySet:
        entry = self._cache.get(domain)
        if entry is not None and entry.is_fresh(self._clock(), self._ttl_ms):
            return entry.keys

        if entry is not None:
            logger.debug("Cached key set expired", domain=domain)

        keys = self._fetcher.get_keys(domain)
        # stamped once the fetch has completed
        self._cache.put(domain, CacheEntry(keys=keys, fetched_at_ms=self._clock()))
        return keys

    def clear(self) -> None:
        self._cache.clear()
