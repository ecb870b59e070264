"""Repository protocols."""

from arena_feed.repositories.protocols.cache_repo import EntryCache

__all__ = ["EntryCache"]
