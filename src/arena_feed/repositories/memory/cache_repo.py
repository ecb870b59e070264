"""In-memory implementation of EntryCache."""

import logging
from collections import OrderedDict
from dataclasses import replace
from typing import Any, Optional

from arena_feed.core.timezone import now_utc
from arena_feed.domain.models import CacheEntry, CACHE_FIELDS

logger = logging.getLogger(__name__)


class InMemoryEntryCache:
    """
    Process-lifetime cache keyed by filter-context cache key.

    Updates are field-scoped: writing trades never touches positions stored
    under the same key. With max_entries set, the least recently used key is
    evicted once the bound is exceeded.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get a copy of the entry for a key."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        self._entries.move_to_end(key)
        return self._copy(entry)

    def update(self, key: str, **fields: Any) -> None:
        """Replace only the provided fields of the entry for a key."""
        unknown = set(fields) - set(CACHE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown cache fields: {sorted(unknown)}")

        values = {name: list(value) for name, value in fields.items() if value is not None}
        entry = self._entries.get(key) or CacheEntry()
        self._entries[key] = replace(entry, updated_at=now_utc(), **values)
        self._entries.move_to_end(key)
        self._evict()

    def keys(self) -> list[str]:
        """List stored cache keys, least recently used first."""
        return list(self._entries.keys())

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def _evict(self) -> None:
        if self._max_entries is None:
            return
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cache entry %s", evicted)

    @staticmethod
    def _copy(entry: CacheEntry) -> CacheEntry:
        return CacheEntry(
            trades=list(entry.trades) if entry.trades is not None else None,
            decisions=list(entry.decisions) if entry.decisions is not None else None,
            positions=list(entry.positions) if entry.positions is not None else None,
            accounts_meta=list(entry.accounts_meta) if entry.accounts_meta is not None else None,
            updated_at=entry.updated_at,
        )
