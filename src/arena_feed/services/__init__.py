"""Service layer - feed reconciliation orchestration."""

from arena_feed.services.feed_adapters import FeedAdapters, FetchResult
from arena_feed.services.merge import AccountScopedMerger, BoundedFeedMerger, merge_accounts_meta
from arena_feed.services.feed_engine import FeedEngine, StreamStatus
from arena_feed.services.event_ingestor import EventIngestor, IngestStats, is_relevant
from arena_feed.services.refresh_scheduler import RefreshScheduler
from arena_feed.services.summary_service import summarize_positions

__all__ = [
    "FeedAdapters",
    "FetchResult",
    "AccountScopedMerger",
    "BoundedFeedMerger",
    "merge_accounts_meta",
    "FeedEngine",
    "StreamStatus",
    "EventIngestor",
    "IngestStats",
    "is_relevant",
    "RefreshScheduler",
    "summarize_positions",
]
