"""Cache entry holding the last known feed state for one filter context."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from arena_feed.domain.models.enums import FeedStream
from arena_feed.domain.models.records import (
    AccountMeta,
    DecisionRecord,
    PositionsSnapshot,
    TradeRecord,
)

CACHE_FIELDS = ("trades", "decisions", "positions", "accounts_meta")


@dataclass
class CacheEntry:
    """
    Last known state for one cache key.

    A field left as None was never written for the key, which is different
    from a fetch that returned an empty list.
    """

    trades: Optional[list[TradeRecord]] = None
    decisions: Optional[list[DecisionRecord]] = None
    positions: Optional[list[PositionsSnapshot]] = None
    accounts_meta: Optional[list[AccountMeta]] = None
    updated_at: Optional[datetime] = field(default=None)

    def stream_items(self, stream: FeedStream) -> Optional[list]:
        """Return the stored list for a stream, or None if never written."""
        return getattr(self, stream.value)
