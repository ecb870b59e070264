"""In-memory repository implementations."""

from arena_feed.repositories.memory.cache_repo import InMemoryEntryCache

__all__ = ["InMemoryEntryCache"]
