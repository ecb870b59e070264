"""Entry cache protocol for per-context feed state."""

from typing import Any, Optional, Protocol

from arena_feed.domain.models import CacheEntry


class EntryCache(Protocol):
    """Interface for the keyed store of last known feed state."""

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get the entry for a cache key, or None if never written."""
        ...

    def update(self, key: str, **fields: Any) -> None:
        """
        Merge the given fields into the entry for a key.

        Only the provided fields are replaced; the entry is created if absent.
        """
        ...

    def keys(self) -> list[str]:
        """List stored cache keys."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...
