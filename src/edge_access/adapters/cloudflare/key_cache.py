from __future__ import annotations

from typing import Dict, Optional

from ...domain.entities import CacheEntry


class KeySetCache:
    """
    In-memory map of provider domain -> CacheEntry.

    Freshness is judged by the reader; stale entries stay until the next
    successful fetch overwrites them. No locking: concurrent writers for the
    same domain simply race and the last `put` wins.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, domain: str) -> Optional[CacheEntry]:
        return self._entries.get(domain)

    def put(self, domain: str, entry: CacheEntry) -> None:
        self._entries[domain] = entry

    def clear(self) -> None:
        """Drop every entry so the next verification refetches key material."""
        self._entries = {}

    def __contains__(self, domain: object) -> bool:
        return domain in self._entries

    def __len__(self) -> int:
        return len(self._entries)
